"""
ezdispatch - derive a request/dispatch layer from an async interface class.
"""

__version__ = "0.1.0"
__logo__ = "⇄"

from ezdispatch.result import Err, Ok, Result, UnwrapError
from ezdispatch.service import GatedService, Service, always_ready, interface
from ezdispatch.utils.exceptions import ConfigError, EzdispatchError, ParseError, SynthesisError
from ezdispatch.model import InterfaceDescriptor, MethodSignature, parse_interface
from ezdispatch.synth import GeneratedModule, generate, generate_file, generate_from_class, load_generated

__all__ = [
    "__version__",
    "Err",
    "Ok",
    "Result",
    "UnwrapError",
    "GatedService",
    "Service",
    "always_ready",
    "interface",
    "ConfigError",
    "EzdispatchError",
    "ParseError",
    "SynthesisError",
    "InterfaceDescriptor",
    "MethodSignature",
    "parse_interface",
    "GeneratedModule",
    "generate",
    "generate_file",
    "generate_from_class",
    "load_generated",
]
