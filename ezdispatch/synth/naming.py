"""Names of everything the synthesizers emit."""

from __future__ import annotations

from dataclasses import dataclass

from ezdispatch.config.schema import GeneratorConfig
from ezdispatch.model.interface import InterfaceDescriptor
from ezdispatch.utils.exceptions import ConfigError

# Private aliases for support symbols, so generated code never shadows or is
# shadowed by names from the original module.
DATACLASS = "_ezd_dataclass"
ANY = "_ezd_Any"
UNION = "_ezd_Union"
CAST = "_ezd_cast"
ASSERT_NEVER = "_ezd_assert_never"
OK = "_ezd_Ok"
ERR = "_ezd_Err"
RESULT = "_ezd_Result"


@dataclass(frozen=True, slots=True)
class GeneratedNames:
    """Identifiers chosen for one interface."""

    interface: str
    request: str
    service: str
    proxy: str
    variants: tuple[tuple[str, str], ...]  # (method name, variant class name)

    def variant_for(self, method: str) -> str:
        for method_name, variant in self.variants:
            if method_name == method:
                return variant
        raise KeyError(method)

    @property
    def variant_classes(self) -> tuple[str, ...]:
        return tuple(variant for _, variant in self.variants)

    @property
    def exports(self) -> tuple[str, ...]:
        """Public names added to the module, in emission order."""
        return (*self.variant_classes, self.request, self.service, self.proxy)


def build_names(interface: InterfaceDescriptor, config: GeneratorConfig) -> GeneratedNames:
    """
    Derive generated identifiers from the interface and the naming settings.

    Raises:
        ConfigError: Two generated names collide with each other or with the
            interface class itself.
    """
    names = GeneratedNames(
        interface=interface.name,
        request=f"{interface.name}{config.request_suffix}",
        service=f"{interface.name}{config.service_suffix}",
        proxy=f"{interface.name}{config.proxy_suffix}",
        variants=tuple((m.name, f"{config.variant_prefix}{m.variant_name}") for m in interface.methods),
    )

    taken: dict[str, str] = {interface.name: "interface class"}
    for role, name in (
        *((f"request variant of '{method}'", variant) for method, variant in names.variants),
        ("request union", names.request),
        ("service class", names.service),
        ("proxy class", names.proxy),
    ):
        if name in taken:
            raise ConfigError(
                f"generated {role} name '{name}' collides with the {taken[name]}; "
                "adjust the naming suffixes or variantPrefix"
            )
        taken[name] = role
    return names


def fresh_local(base: str, taken: set[str] | tuple[str, ...]) -> str:
    """Return ``base`` or ``base_N`` so that it is not in ``taken``."""
    candidate = base
    counter = 1
    while candidate in taken:
        candidate = f"{base}_{counter}"
        counter += 1
    return candidate
