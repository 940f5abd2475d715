"""
Attribute descriptors and the rules deciding which of them become options.

An `AttributeDescriptor` is the read-only metadata of one constructible
field. Descriptors are normally derived from dataclass fields with
`attributes_from_dataclass`, where the command-line specific settings live in
the field metadata:

    @dataclass
    class App(Getopt):
        verbose: bool = field(default=False, metadata={"help": "Be chatty"})
        _cache: str = field(default="~/.cache", metadata={"cmd_flag": "cache"})
        secret: str = field(default="", metadata={"getopt": False})

Recognized metadata keys are `help`, `cmd_flag`, `cmd_aliases`, `getopt`,
`lazy` and `type_name`.
"""

import dataclasses
import types
import typing
from dataclasses import dataclass
from typing import Any, Iterable, Literal, Optional, Type, Union

RESERVED_PREFIX = "_"


class _MissingType:
    """Marker for "no value" where None is a legitimate value."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _MissingType()

_BUILTIN_TYPE_NAMES: dict[type, str] = {
    bool: "Bool",
    int: "Int",
    float: "Num",
    str: "Str",
    list: "ArrayRef",
    tuple: "ArrayRef",
    set: "ArrayRef",
    frozenset: "ArrayRef",
    dict: "HashRef",
}


@dataclass(frozen=True)
class AttributeDescriptor:
    """
    Metadata for one attribute of a target object.

    `type_parents` lists the ancestors of `type_name`, nearest first. They
    are tried in order when `type_name` itself has no registered option type.
    """

    name: str
    init_arg: Optional[str] = MISSING
    type_name: Optional[str] = None
    type_parents: tuple[str, ...] = ()
    required: bool = False
    default: Any = MISSING
    default_factory: Any = MISSING
    lazy: bool = False
    documentation: Optional[str] = None
    cmd_flag: Optional[str] = None
    cmd_aliases: tuple[str, ...] = ()
    excluded: bool = False
    cli_aware: bool = False

    def __post_init__(self) -> None:
        if self.init_arg is MISSING:
            object.__setattr__(self, "init_arg", self.name)
        if isinstance(self.cmd_aliases, str):
            object.__setattr__(self, "cmd_aliases", (self.cmd_aliases,))
        else:
            object.__setattr__(self, "cmd_aliases", tuple(self.cmd_aliases))
        object.__setattr__(self, "type_parents", tuple(self.type_parents))

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING or self.default_factory is not MISSING

    @property
    def default_is_callable(self) -> bool:
        return self.default_factory is not MISSING

    @property
    def type_chain(self) -> tuple[str, ...]:
        """The type name followed by its ancestors, or () when untyped."""
        if self.type_name is None:
            return ()
        return (self.type_name, *self.type_parents)


def eligible_attributes(
    descriptors: Iterable[AttributeDescriptor],
) -> list[AttributeDescriptor]:
    """
    Filter out attributes that should not become command-line options.

    An attribute is skipped when it is explicitly excluded, or when its name
    starts with an underscore and it has not opted in (either by being
    marked `cli_aware` or by carrying a `cmd_flag`). Order is preserved.
    """
    return [
        attr
        for attr in descriptors
        if not attr.excluded
        and (
            attr.cli_aware
            or attr.cmd_flag is not None
            or not attr.name.startswith(RESERVED_PREFIX)
        )
    ]


def _get_optional_inner_type(type_hint: Any) -> Optional[Any]:
    """
    If type_hint is Optional[T] (i.e., Union[T, None]), return T.
    Otherwise, return None.
    """
    origin = typing.get_origin(type_hint)
    if origin is Union or origin is types.UnionType:
        args = typing.get_args(type_hint)
        non_none_args = [a for a in args if a is not type(None)]
        if len(non_none_args) == 1 and type(None) in args:
            return non_none_args[0]
    return None


def _class_chain(cls: type) -> list[str]:
    names = []
    for klass in cls.__mro__:
        if klass is object:
            continue
        name = _BUILTIN_TYPE_NAMES.get(klass, klass.__name__)
        if name not in names:
            names.append(name)
    return names


def type_constraint_chain(type_hint: Any) -> tuple[str, ...]:
    """
    Translate a Python type hint into a type-name chain, nearest first.

    Examples:
        bool            -> ("Bool", "Int")
        list[int]       -> ("ArrayRef[Int]", "ArrayRef")
        dict[str, float]-> ("HashRef[Num]", "HashRef")
        Optional[str]   -> ("Str",)
    """
    inner_type = _get_optional_inner_type(type_hint)
    if inner_type is not None:
        type_hint = inner_type

    origin = typing.get_origin(type_hint)
    args = typing.get_args(type_hint)

    if origin is Literal:
        value_types = {type(arg) for arg in args}
        if len(value_types) == 1:
            return type_constraint_chain(value_types.pop())
        return ("Str",)

    if origin is not None and origin in _BUILTIN_TYPE_NAMES:
        container = _BUILTIN_TYPE_NAMES[origin]
        # dict[K, V] is keyed on its value type, the others on their element type
        elem_type = None
        if container == "HashRef" and len(args) == 2:
            elem_type = args[1]
        elif container == "ArrayRef" and args:
            elem_type = args[0]
        if elem_type is None or elem_type is Any:
            return (container,)
        names = [f"{container}[{name}]" for name in type_constraint_chain(elem_type)]
        return (*names, container)

    if isinstance(type_hint, type):
        return tuple(_class_chain(type_hint))

    # Unions, Any, string annotations that could not be resolved...
    return (str(type_hint),)


def _descriptor_from_field(
    field: dataclasses.Field, type_hint: Any
) -> AttributeDescriptor:
    metadata = field.metadata
    if "type_name" in metadata:
        chain: tuple[str, ...] = (metadata["type_name"],)
    else:
        chain = type_constraint_chain(type_hint)

    default = MISSING if field.default is dataclasses.MISSING else field.default
    default_factory = (
        MISSING
        if field.default_factory is dataclasses.MISSING
        else field.default_factory
    )
    has_default = default is not MISSING or default_factory is not MISSING

    getopt_flag = metadata.get("getopt")
    return AttributeDescriptor(
        name=field.name,
        init_arg=field.name,
        type_name=chain[0] if chain else None,
        type_parents=chain[1:],
        required=not has_default,
        default=default,
        default_factory=default_factory,
        lazy=bool(metadata.get("lazy", False)),
        documentation=metadata.get("help"),
        cmd_flag=metadata.get("cmd_flag"),
        cmd_aliases=metadata.get("cmd_aliases", ()),
        excluded=getopt_flag is False,
        cli_aware=getopt_flag is True,
    )


def attributes_from_dataclass(cls: Type[Any]) -> list[AttributeDescriptor]:
    """
    Build attribute descriptors for every init field of a dataclass.

    Fields are reported in declaration order, inherited fields first. Fields
    declared with `init=False` cannot be passed to the constructor and are
    left out.

    Raises:
        TypeError: If `cls` is not a dataclass.
    """
    if not dataclasses.is_dataclass(cls):
        raise TypeError(f"{cls!r} is not a dataclass")

    type_hints = typing.get_type_hints(cls)
    return [
        _descriptor_from_field(field, type_hints.get(field.name, field.type))
        for field in dataclasses.fields(cls)
        if field.init
    ]
