"""Interface model: descriptors and the declaration parser."""

from ezdispatch.model.interface import (
    InterfaceDescriptor,
    MethodSignature,
    ParameterSpec,
    ReceiverKind,
    ResultShape,
)
from ezdispatch.model.parser import (
    interface_from_class,
    interface_from_node,
    parse_interface,
    parse_interface_file,
)

__all__ = [
    "InterfaceDescriptor",
    "MethodSignature",
    "ParameterSpec",
    "ReceiverKind",
    "ResultShape",
    "interface_from_class",
    "interface_from_node",
    "parse_interface",
    "parse_interface_file",
]
