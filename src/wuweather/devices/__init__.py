"""Device tree: definitions, extraction, reconciliation and the update cycle.

Layout::

    devices/
    ├── paths.py        # FieldPath, resolve (unit system -> path string)
    ├── extract.py      # find_nodes, coerce_numeric/coerce_text, INVALID
    ├── definitions.py  # field variants, ResourceDefinition, DefinitionTree
    ├── catalog.py      # the Weather Underground tree (DEVICE_DEFINITIONS)
    ├── host.py         # ResourceHost protocol, InMemoryHost
    ├── reconcile.py    # create missing devices, address helpers
    └── cycle.py        # apply_document, FetchAndApplyCycle

Adding a device
---------------
1. Add a ``ResourceDefinition`` to a root's ``children`` in ``catalog.py``
   (or a new ``RootDefinition`` to ``DEVICE_DEFINITIONS``). Give every unit
   system a path; ``FieldPath.same`` covers unit-independent ones.
2. Pick the field variant: ``NumericField`` (optionally with a per-unit
   display suffix), ``TextField``, or ``CompositeField`` with a pure render
   function.
3. Reconciliation creates the device on the next cycle; nothing else needs
   wiring.

Only the leaf modules are re-exported here; import ``host``, ``reconcile``
and ``cycle`` from their modules.
"""

from wuweather.devices.definitions import (
    INTERFACE_NAME,
    PLACEHOLDER,
    CompositeField,
    DefinitionTree,
    NumericField,
    ResourceDefinition,
    RootDefinition,
    TextField,
    extract_field,
)
from wuweather.devices.extract import (
    INVALID,
    ExtractedValue,
    Numeric,
    Text,
    coerce_numeric,
    coerce_text,
    find_nodes,
)
from wuweather.devices.paths import DefinitionError, FieldPath, resolve

__all__ = [
    "INTERFACE_NAME",
    "INVALID",
    "PLACEHOLDER",
    "CompositeField",
    "DefinitionError",
    "DefinitionTree",
    "ExtractedValue",
    "FieldPath",
    "Numeric",
    "NumericField",
    "ResourceDefinition",
    "RootDefinition",
    "Text",
    "TextField",
    "coerce_numeric",
    "coerce_text",
    "extract_field",
    "find_nodes",
    "resolve",
]
