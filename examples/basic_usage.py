"""
Example demonstrating the rules-deployer library.

This script creates a sample rules directory and shows how to use
RuleDeployer to build the Cursor rules and combined instruction files.
"""

import shutil
import tempfile
from pathlib import Path

from rules_deployer import RuleDeployer


def create_example_rules() -> Path:
    """Create a temporary project with a rules/ directory."""
    project_dir = Path(tempfile.mkdtemp(prefix="rules_deployer_example_"))
    rules_dir = project_dir / "rules"
    rules_dir.mkdir()

    (rules_dir / "python.md").write_text("""# Python Guidelines

- Use type hints on public functions
- Prefer pathlib over os.path
""")

    (rules_dir / "sql.md").write_text("""# SQL Guidelines

- Use uppercase keywords
- Never build queries with string formatting
""")

    return project_dir


def main() -> None:
    project_dir = create_example_rules()

    try:
        deployer = RuleDeployer(project_dir / "rules", project_dir / "dist")
        print(f"Available rules: {', '.join(deployer.list_rules())}")
        print()

        written = deployer.deploy(["python", "sql"], echo=print)

        print()
        print("Generated files:")
        for path in written:
            print(f"  {path.relative_to(project_dir)}")

        print()
        print("=" * 60)
        print((project_dir / "dist" / ".cursor" / "rules" / "python" / "RULE.md").read_text())
        print("=" * 60)
        print((project_dir / "dist" / ".github" / "copilot-instructions.md").read_text())

    finally:
        shutil.rmtree(project_dir)


if __name__ == "__main__":
    main()
