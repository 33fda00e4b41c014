from .deployer import (
    CLAUDE_INSTRUCTIONS,
    COMBINED_OUTPUTS,
    COMBINED_SEPARATOR,
    COPILOT_INSTRUCTIONS,
    CURSOR_RULES_DIR,
    RULE_FILENAME,
    RuleDeployer,
    escape_yaml_string,
    extract_title,
    parse_frontmatter,
    render_frontmatter,
)
from .exceptions import DeploymentError, RuleDeployError, RuleNotFoundError, UsageError


__all__ = [
    "CLAUDE_INSTRUCTIONS",
    "COMBINED_OUTPUTS",
    "COMBINED_SEPARATOR",
    "COPILOT_INSTRUCTIONS",
    "CURSOR_RULES_DIR",
    "RULE_FILENAME",
    "DeploymentError",
    "RuleDeployError",
    "RuleDeployer",
    "RuleNotFoundError",
    "UsageError",
    "escape_yaml_string",
    "extract_title",
    "parse_frontmatter",
    "render_frontmatter",
]
