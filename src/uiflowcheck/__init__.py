from __future__ import annotations

"""uiflowcheck - validation tooling for generated UI flow prototypes."""

__version__ = "0.1.0"

from uiflowcheck.config import UIFlowConfig
from uiflowcheck.navigation import NavigationValidator
from uiflowcheck.runner import ValidationSuite

__all__ = ["NavigationValidator", "UIFlowConfig", "ValidationSuite", "__version__"]
