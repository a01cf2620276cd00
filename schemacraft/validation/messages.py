"""Default English validation messages.

Templates use ``:placeholder`` markers. ``:attribute`` is always replaced
with the field's display label; rule-specific markers (``:min``,
``:values``...) are filled in by the engine.
"""

from collections.abc import Mapping

DEFAULT_MESSAGES: dict[str, str] = {
    "required": "The :attribute field is required.",
    "required_with": "The :attribute field is required when :values is present.",
    "required_without": "The :attribute field is required when :values is not present.",
    "required_if": "The :attribute field is required when :other is :value.",
    "prohibited": "The :attribute field is prohibited.",
    "prohibited_if": "The :attribute field is prohibited when :other is :value.",
    "string": "The :attribute field must be a string.",
    "numeric": "The :attribute field must be a number.",
    "integer": "The :attribute field must be an integer.",
    "boolean": "The :attribute field must be true or false.",
    "array": "The :attribute field must be an array.",
    "email": "The :attribute field must be a valid email address.",
    "digits": "The :attribute field must be :digits digits.",
    "date": "The :attribute field must be a valid date.",
    "alpha": "The :attribute field must only contain letters.",
    "alpha_num": "The :attribute field must only contain letters and numbers.",
    "in": "The selected :attribute is invalid.",
    "not_in": "The selected :attribute is invalid.",
    "regex": "The :attribute field format is invalid.",
    "url": "The :attribute field must be a valid URL.",
    "uuid": "The :attribute field must be a valid UUID.",
}

# Size rules read differently for numbers, strings and collections
SIZE_MESSAGES: dict[str, dict[str, str]] = {
    "min": {
        "numeric": "The :attribute field must be at least :min.",
        "string": "The :attribute field must be at least :min characters.",
        "array": "The :attribute field must have at least :min items.",
    },
    "max": {
        "numeric": "The :attribute field must not be greater than :max.",
        "string": "The :attribute field must not be greater than :max characters.",
        "array": "The :attribute field must not have more than :max items.",
    },
    "between": {
        "numeric": "The :attribute field must be between :min and :max.",
        "string": "The :attribute field must be between :min and :max characters.",
        "array": "The :attribute field must have between :min and :max items.",
    },
}

FALLBACK_MESSAGE = "The :attribute field is invalid."


def format_message(template: str, replacements: Mapping[str, str]) -> str:
    """Fill ``:placeholder`` markers in a message template.

    Longer keys are replaced first so ``:min`` never clobbers ``:minimum``.
    """
    message = template
    for key in sorted(replacements, key=len, reverse=True):
        message = message.replace(f":{key}", replacements[key])
    return message
