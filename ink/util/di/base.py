"""Provider base class and component names."""

from typing import ClassVar, Literal

from dishka import Provider

# Components with interchangeable production and mock providers
Component = Literal["persistence"]


class ProviderBase(Provider):
    """Provider carrying the metadata used to pick implementations.

    A component base sets ``__mock_component__``; its subclasses set
    ``__is_mock__`` to say which implementation they are. Concrete
    providers leave both at their defaults.
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False
