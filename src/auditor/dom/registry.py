# src/auditor/dom/registry.py
import importlib
import pkgutil
import logging
import threading
from typing import Dict, List, Callable, Any, Optional, Set

from .core import ElementDefinition
from auditor.model import IssueType

logger = logging.getLogger(__name__)


class DOMRegistry:
    """
    Central registry for DOM elements, parsers, and audit rules.

    Dynamically discovers and loads ElementDefinition modules from the
    'auditor.dom.elements' package to populate parsers, rules grouped by
    validator check, and the WCAG guidelines they can reference.
    """

    _parsers: Dict[str, Callable] = {}
    _audit_rules: Dict[IssueType, List[Callable]] = {}
    _all_guidelines: Set[str] = set()
    _loaded: bool = False
    _lock = threading.Lock()

    @classmethod
    def discover(cls) -> None:
        """
        Discovers and registers all element definitions found in the 'auditor.dom.elements' package.

        This method scans the `auditor.dom.elements` package for modules containing a
        `DEFINITION` attribute (instance of `ElementDefinition`). It registers parsers
        for every tag the definition names and files its rules under their check.
        Safe to call from several threads; the scan runs once per process.
        """
        if cls._loaded:
            return

        with cls._lock:
            if cls._loaded:
                return

            import auditor.dom.elements as elements_pkg

            parsers: Dict[str, Callable] = {}
            audit_rules: Dict[IssueType, List[Callable]] = {}
            guidelines: Set[str] = set()

            for _, name, _ in sorted(pkgutil.iter_modules(elements_pkg.__path__)):
                full_name = f"auditor.dom.elements.{name}"
                module = importlib.import_module(full_name)
                defn = getattr(module, "DEFINITION", None)
                if not isinstance(defn, ElementDefinition):
                    continue

                # Register parser for each tag the definition covers
                if defn.parser:
                    for tag_name in defn.tag_names:
                        parsers[tag_name] = defn.parser

                for rule in defn.audit_rules:
                    check = getattr(rule, "check", IssueType.MALFORMED_HTML)
                    audit_rules.setdefault(check, []).append(cls._wrap_rule(defn.model, rule))

                guidelines.update(defn.guidelines)
                logger.debug(f"Element definition loaded: {name} ({', '.join(defn.tag_names) or '*'})")

            cls._parsers = parsers
            cls._audit_rules = audit_rules
            cls._all_guidelines = guidelines
            cls._loaded = True

    @staticmethod
    def _wrap_rule(model_type: Any, rule_func: Callable) -> Callable:
        """
        Wraps a single audit rule with a type check.

        Args:
            model_type: The class type this rule applies to.
            rule_func: The function executing the logic.
        """
        def wrapped(node: Any, config: Any) -> list:
            if isinstance(node, model_type):
                return rule_func(node, config)
            return []

        wrapped.__name__ = rule_func.__name__
        return wrapped

    @classmethod
    def get_parser(cls, tag_name: str) -> Optional[Callable]:
        """Retrieves the parser function for a specific HTML tag."""
        return cls._parsers.get(tag_name)

    @classmethod
    def get_rules(cls, check: IssueType) -> List[Callable]:
        """Returns the node rules registered for one validator check."""
        return list(cls._audit_rules.get(check, []))

    @classmethod
    def get_all_guidelines(cls) -> List[str]:
        """Returns every WCAG success criterion a registered rule can report."""
        return sorted(cls._all_guidelines)
