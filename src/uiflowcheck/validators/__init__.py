"""Validators for generated UI flow projects."""

from uiflowcheck.validators.base import Validator
from uiflowcheck.validators.consistency import ConsistencyValidator
from uiflowcheck.validators.iframe_src import IframeSrcValidator
from uiflowcheck.validators.index_data import IndexDataValidator
from uiflowcheck.validators.standards import Standards, load_standards
from uiflowcheck.validators.structure import StructureValidator
from uiflowcheck.validators.template_variables import TemplateVariablesValidator
from uiflowcheck.validators.traceability import TraceabilityValidator

__all__ = [
    "Validator",
    "ConsistencyValidator",
    "IframeSrcValidator",
    "IndexDataValidator",
    "Standards",
    "load_standards",
    "StructureValidator",
    "TemplateVariablesValidator",
    "TraceabilityValidator",
]
