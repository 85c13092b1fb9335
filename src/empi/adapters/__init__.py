"""
Resource model adapters, one per supported FHIR release.

`get_adapter` is the only place the engine branches on FHIR version.
"""

from src.empi.adapters.base import Element, Resource, ResourceModelAdapter
from src.empi.adapters.r4 import (
    Dstu3PersonAdapter,
    R4BPersonAdapter,
    R4PersonAdapter,
)
from src.empi.adapters.r5 import R5PersonAdapter
from src.exceptions import UnsupportedModelVersionError
from src.settings import FhirVersion

_ADAPTERS: dict[FhirVersion, type[ResourceModelAdapter]] = {
    FhirVersion.DSTU3: Dstu3PersonAdapter,
    FhirVersion.R4: R4PersonAdapter,
    FhirVersion.R4B: R4BPersonAdapter,
    FhirVersion.R5: R5PersonAdapter,
}


def get_adapter(version: FhirVersion | str) -> ResourceModelAdapter:
    """
    Return the adapter for a FHIR release.

    Raises:
        UnsupportedModelVersionError: If no adapter handles the release
    """
    try:
        fhir_version = FhirVersion(version)
    except ValueError as e:
        raise UnsupportedModelVersionError(version) from e

    adapter_cls = _ADAPTERS.get(fhir_version)
    if adapter_cls is None:
        raise UnsupportedModelVersionError(version)
    return adapter_cls()


__all__ = [
    "Element",
    "Resource",
    "ResourceModelAdapter",
    "get_adapter",
]
