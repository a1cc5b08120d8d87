from keystone.tracer import DependsOn, Note, Received, Request, Tracer


def test_renders_events_as_indented_tree():
    tracer = Tracer()

    tracer.request("Test")
    tracer.depends_on(["A", "B"])
    tracer.note("Some note")
    tracer.received()

    assert str(tracer) == "Test requested (\n\tDependencies: [A, B]\n\tNote: Some note\n)"


def test_renders_nested_requests_and_missing_dependencies():
    tracer = Tracer()

    tracer.request("A")
    tracer.depends_on(["B"])
    tracer.request("B")
    tracer.depends_on([])
    tracer.received()
    tracer.request("C")

    assert tracer.render().splitlines() == [
        "A requested (",
        "\tDependencies: [B]",
        "\tB requested (",
        "\t\tDependencies: none",
        "\t)",
        "\tC requested (",
    ]


def test_events_are_recorded_in_order():
    tracer = Tracer()

    tracer.request("A")
    tracer.depends_on(("B",))
    tracer.note("note")
    tracer.received()

    assert tracer.events == (Request("A"), DependsOn(("B",)), Note("note"), Received())
    assert len(tracer) == 4


def test_empty_tracer_renders_nothing():
    assert str(Tracer()) == ""
