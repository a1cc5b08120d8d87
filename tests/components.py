from typing import Annotated

from keystone import Container, ContainerAware, FactoryProvider


class Foo:
    def __init__(self, A, B, C):
        self.A = A
        self.B = B
        self.C = C

    def bar(self, A, B, C):
        return [A, B, C]


class SomeService:
    def __init__(self, aValue):
        self.injected_value = aValue


class QualifiedService:
    def __init__(self, value: Annotated[str, "aValue"]):
        self.injected_value = value


class SomeFactory:
    def some_method(self, aValue):
        return aValue


class Multiplier:
    def __init__(self, factor):
        self.factor = factor

    def __call__(self, number):
        return self.factor * number


class SomeProviderWithOptions(FactoryProvider):
    def __init__(self):
        self.factor = 1

    def set_factor(self, factor):
        self.factor = factor

    def get_factory(self):
        return [self, "factory"]

    def factory(self):
        return Multiplier(self.factor)


class SomeActionController:
    def action_one(self, dep1, dep2):
        return f"{dep1} {dep2}"

    def action_two(self, dep1, dep2):
        return f"{dep1} {dep2}"


class SomeActionControllerProvider(FactoryProvider):
    def get_factory(self):
        return [self, "factory"]

    def factory(self):
        return SomeActionController()


class SomeDecorator(FactoryProvider):
    def get_factory(self):
        return ["DecoratedInstance", (self, "factory")]

    def factory(self, instance):
        return instance + "World"


class FooContainerAware(ContainerAware):
    def __init__(self):
        self.container = None

    def set_container(self, container: Container) -> None:
        self.container = container

    def require(self, *dependencies):
        if len(dependencies) == 1:
            return self.container[dependencies[0]]
        return [self.container[dependency] for dependency in dependencies]
