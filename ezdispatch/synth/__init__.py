"""Synthesizers and the pipeline that assembles their output."""

from ezdispatch.synth.assembler import GeneratedModule, assemble
from ezdispatch.synth.dispatcher import DispatcherCode, synthesize_dispatcher
from ezdispatch.synth.naming import GeneratedNames, build_names
from ezdispatch.synth.pipeline import generate, generate_file, generate_from_class, load_generated
from ezdispatch.synth.proxy import ProxyCode, synthesize_proxies
from ezdispatch.synth.request_type import RequestTypeCode, synthesize_request_type

__all__ = [
    "DispatcherCode",
    "GeneratedModule",
    "GeneratedNames",
    "ProxyCode",
    "RequestTypeCode",
    "assemble",
    "build_names",
    "generate",
    "generate_file",
    "generate_from_class",
    "load_generated",
    "synthesize_dispatcher",
    "synthesize_proxies",
    "synthesize_request_type",
]
