"""
Stock rule set loaded for a tenant that has not defined its own rules.
"""

from typing import List

from .models import Rule, RuleKind, RuleStrength

MODULE_NAME = "mod-password-validator"
USER_NAME_PLACEHOLDER = "<USER_NAME>"


def default_rules() -> List[Rule]:
    """Build the default pattern rules."""
    return [
        Rule(
            rule_id="5105b55a-b9a3-4f76-9402-a5243ea63c95",
            name="password_length",
            kind=RuleKind.PATTERN,
            strength=RuleStrength.STRONG,
            order=0,
            pattern=r"^.{8,}$",
            description="The password length must be minimum 8 digits",
            message_id="password.length.invalid",
            module_name=MODULE_NAME
        ),
        Rule(
            rule_id="dc653de8-f0df-48ab-9630-13aacfe8e8f4",
            name="alphabetical_letters",
            kind=RuleKind.PATTERN,
            strength=RuleStrength.STRONG,
            order=1,
            pattern=r"(?=.*[a-z])(?=.*[A-Z]).+",
            description="The password must contain both upper and lower case letters",
            message_id="password.alphabetical.invalid",
            module_name=MODULE_NAME
        ),
        Rule(
            rule_id="3e3c53ae-73c2-4eba-9f09-f2c9a892c7a2",
            name="numeric_symbol",
            kind=RuleKind.PATTERN,
            strength=RuleStrength.STRONG,
            order=2,
            pattern=r"(?=.*\d).+",
            description="The password must contain at least one numeric character",
            message_id="password.number.invalid",
            module_name=MODULE_NAME
        ),
        Rule(
            rule_id="2e82f890-49e8-46fc-923d-644f33dc5c3f",
            name="special_character",
            kind=RuleKind.PATTERN,
            strength=RuleStrength.STRONG,
            order=3,
            pattern=r"""(?=.*[!"#$%&'()*+,\-./:;<=>?@\[\]^_`{|}~]).+""",
            description="The password must contain at least one special character",
            message_id="password.specialCharacter.invalid",
            module_name=MODULE_NAME
        ),
        Rule(
            rule_id="2f390fa6-a2f8-4027-abaf-ee61952668bc",
            name="no_user_name",
            kind=RuleKind.PATTERN,
            strength=RuleStrength.STRONG,
            order=4,
            pattern=r"^(?:(?!" + USER_NAME_PLACEHOLDER + r").)+$",
            description="The password must not contain your username",
            message_id="password.usernameDuplicate.invalid",
            module_name=MODULE_NAME
        ),
        Rule(
            rule_id="093f090f-543e-4a04-8b0f-9bde947a390d",
            name="no_consecutive_whitespaces",
            kind=RuleKind.PATTERN,
            strength=RuleStrength.STRONG,
            order=9,
            pattern=r"^(?:(?!\s{2,}).)+$",
            description="The password must not contain multiple consecutive whitespaces",
            message_id="password.consecutiveWhitespaces.invalid",
            module_name=MODULE_NAME
        ),
    ]
