"""
Example showing how missing rules and missing headings are reported.
"""

import shutil
import tempfile
import warnings
from pathlib import Path

from rules_deployer import RuleDeployer, RuleNotFoundError


def main() -> None:
    project_dir = Path(tempfile.mkdtemp(prefix="warning_example_"))

    try:
        rules_dir = project_dir / "rules"
        rules_dir.mkdir()
        (rules_dir / "existing.md").write_text("# Existing Rule\n\nThis file exists!")
        (rules_dir / "untitled.md").write_text("No heading on this one.")

        deployer = RuleDeployer(rules_dir, project_dir / "dist")

        print("1. Deploying with missing rules:\n")
        try:
            deployer.deploy(["existing", "missing1", "missing2"])
        except RuleNotFoundError as e:
            print(f"  Error: {e}")
            print(f"  Missing names: {e.names}")
            print(f"  dist exists afterwards: {deployer.dist_dir.exists()}")

        print("\n" + "=" * 60)
        print("\n2. Capturing warnings programmatically:\n")

        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always")
            deployer.deploy(["existing", "untitled"])

            for warning in w:
                print(f"  - {warning.category.__name__}: {warning.message}")

        print("\n" + "=" * 60)
        print("\n3. Checking the deployment after a source edit:\n")

        (rules_dir / "existing.md").write_text("# Renamed Rule\n\nThis file changed!")
        for problem in deployer.check(["existing", "untitled"]):
            print(f"  - {problem}")

    finally:
        shutil.rmtree(project_dir)


if __name__ == "__main__":
    main()
