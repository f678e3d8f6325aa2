import logging
from typing import Any, Dict, Iterable, List, Optional

import yaml
from pydantic import ValidationError

from ..errors import DefinitionError
from .definitions import BUILT_IN_DIAGNOSTICS
from .models import DiagnosticDefinition

logger = logging.getLogger(__name__)


def load_diagnostic_data(data: Dict[str, Any]) -> DiagnosticDefinition:
    """
    Validates the raw dictionary data against the DiagnosticDefinition model
    and performs the cross-reference checks pydantic cannot express.
    """
    try:
        definition = DiagnosticDefinition.model_validate(data)
    except ValidationError as e:
        raise DefinitionError(f"Invalid diagnostic definition '{data.get('id', '?')}': {e}") from e

    if not definition.questions:
        raise DefinitionError(f"Diagnostic '{definition.id}' has no questions")

    question_ids = set()
    for question in definition.questions:
        if question.id in question_ids:
            raise DefinitionError(f"Duplicate question ID '{question.id}' in diagnostic '{definition.id}'")
        question_ids.add(question.id)

        if not question.options:
            raise DefinitionError(f"Question '{question.id}' in diagnostic '{definition.id}' has no options")
        option_values = set()
        for option in question.options:
            if option.value in option_values:
                raise DefinitionError(f"Duplicate option value '{option.value}' in question '{question.id}'")
            option_values.add(option.value)

    for pillar in definition.pillars:
        unknown = [qid for qid in pillar.question_ids if qid not in question_ids]
        if unknown:
            raise DefinitionError(f"Pillar '{pillar.name}' references unknown questions: {sorted(unknown)}")

    category_ids = {category.id for category in definition.categories}
    if len(category_ids) != len(definition.categories):
        raise DefinitionError(f"Duplicate category ID in diagnostic '{definition.id}'")
    for question in definition.questions:
        for option in question.options:
            if option.category is None:
                if category_ids:
                    raise DefinitionError(f"Option '{option.value}' of question '{question.id}' has no category")
            elif option.category not in category_ids:
                raise DefinitionError(
                    f"Option '{option.value}' of question '{question.id}' references unknown category '{option.category}'"
                )

    if definition.stages is not None and not definition.stages:
        raise DefinitionError(f"Diagnostic '{definition.id}' declares an empty stage table")

    return definition


def load_diagnostics_data(items: Iterable[Dict[str, Any]]) -> Dict[str, DiagnosticDefinition]:
    definitions: Dict[str, DiagnosticDefinition] = {}
    for item in items:
        definition = load_diagnostic_data(item)
        if definition.id in definitions:
            raise DefinitionError(f"Duplicate diagnostic ID found: {definition.id}")
        definitions[definition.id] = definition
    return definitions


def load_diagnostics_from_file(file_path: str) -> Dict[str, DiagnosticDefinition]:
    """
    Loads diagnostic definitions from a YAML file. The file holds either a
    single definition or a top-level `diagnostics` list.
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise DefinitionError(f"File not found: {file_path}")
    except yaml.YAMLError as e:
        raise DefinitionError(f"Error parsing YAML file {file_path}: {e}")

    if data is None:
        raise DefinitionError(f"YAML file is empty or invalid: {file_path}")

    items: List[Dict[str, Any]]
    if isinstance(data, dict) and "diagnostics" in data:
        items = data["diagnostics"]
    elif isinstance(data, dict):
        items = [data]
    else:
        raise DefinitionError(f"Unexpected top-level YAML structure in {file_path}")

    definitions = load_diagnostics_data(items)
    logger.info(f"Loaded {len(definitions)} diagnostic definition(s) from {file_path}")
    return definitions


def load_default_diagnostics(extra_path: Optional[str] = None) -> Dict[str, DiagnosticDefinition]:
    """Built-in diagnostics, optionally overridden or extended from a YAML file."""
    definitions = load_diagnostics_data(BUILT_IN_DIAGNOSTICS)
    if extra_path:
        definitions.update(load_diagnostics_from_file(extra_path))
    return definitions
