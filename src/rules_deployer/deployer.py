import shutil
import warnings
from collections.abc import Callable, Sequence
from pathlib import Path

import yaml

from .exceptions import DeploymentError, RuleDeployError, RuleNotFoundError, UsageError


# Output layout, relative to the output root
CURSOR_RULES_DIR = Path(".cursor") / "rules"
RULE_FILENAME = "RULE.md"
COPILOT_INSTRUCTIONS = Path(".github") / "copilot-instructions.md"
CLAUDE_INSTRUCTIONS = Path(".claude") / "CLAUDE.md"
COMBINED_OUTPUTS = (COPILOT_INSTRUCTIONS, CLAUDE_INSTRUCTIONS)

RULE_SUFFIX = ".md"
COMBINED_SEPARATOR = "\n---\n\n"

# Constants for frontmatter parsing
_FRONTMATTER_PARTS = 2  # Expected parts when splitting frontmatter


def escape_yaml_string(value: str) -> str:
    """Escape a value for a double-quoted YAML scalar (backslashes first, then quotes)."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def extract_title(first_line: str, name: str) -> str:
    """
    Derive a rule title from the first line of its document.

    Args:
        first_line: First line of the document, with or without its line ending.
        name: Rule name, used when the line is not a heading or has no text.

    Returns:
        The heading text without the leading '#' and surrounding whitespace.
    """
    line = first_line.rstrip("\r\n")
    if not line.startswith("#"):
        return name
    title = line[1:].strip()
    return title or name


def render_frontmatter(title: str) -> str:
    """Build the frontmatter block written at the top of every RULE.md."""
    return (
        "---\n"
        f'description: "{escape_yaml_string(title)}"\n'
        "globs: []\n"
        "alwaysApply: true\n"
        "---\n"
        "\n"
    )


def parse_frontmatter(content: str) -> tuple[str, dict | None]:
    """
    Parse YAML frontmatter from markdown content.

    Args:
        content: Raw markdown content

    Returns:
        Tuple of (content without frontmatter, frontmatter dict or None)
    """
    if content.startswith("---\n"):
        parts = content[4:].split("\n---\n", 1)
        if len(parts) == _FRONTMATTER_PARTS:
            try:
                frontmatter = yaml.safe_load(parts[0])
            except yaml.YAMLError:
                # If YAML parsing fails, treat as regular content
                return content, None
            if isinstance(frontmatter, dict):
                return parts[1], frontmatter

    return content, None


def _check_usage(names: Sequence[str]) -> list[str]:
    names = list(names)
    if not names:
        msg = "No filename provided"
        raise UsageError(msg)

    invalid = [name for name in names if not _is_plain_name(name)]
    if invalid:
        msg = f"Invalid rule names (must be bare file names): {', '.join(map(repr, invalid))}"
        raise UsageError(msg)

    seen: set[str] = set()
    duplicates = []
    for name in names:
        if name in seen and name not in duplicates:
            duplicates.append(name)
        seen.add(name)
    if duplicates:
        msg = f"Rule names given more than once: {', '.join(duplicates)}"
        raise UsageError(msg)
    return names


def _is_plain_name(name: str) -> bool:
    # Names are joined under both rules_dir and dist_dir, so they must stay a single segment
    if not name or name in (".", ".."):
        return False
    if "/" in name or "\\" in name:
        return False
    return not Path(name).is_absolute()


def _read_first_line(path: Path) -> str:
    with path.open("rb") as f:
        return f.readline().decode("utf-8", errors="replace")


def _write_bytes(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)


class RuleDeployer:
    """Deploy guideline documents from a rules directory into an output directory."""

    def __init__(self, rules_dir: str | Path = "rules", dist_dir: str | Path = "dist") -> None:
        """
        Initialize the deployer.

        A missing rules_dir is not an error here: every rule requested from it
        is reported as not found by deploy, which then removes the output root.

        Args:
            rules_dir: Directory holding one <name>.md file per guideline document.
            dist_dir: Output root. It is deleted and recreated on every deploy.
        """
        self.rules_dir = Path(rules_dir)
        self.dist_dir = Path(dist_dir)

    def source_path(self, name: str) -> Path:
        return self.rules_dir / f"{name}{RULE_SUFFIX}"

    def list_rules(self) -> list[str]:
        """
        Return the names of all available rules, sorted.

        Raises:
            NotADirectoryError: If rules_dir is not a directory.
        """
        if not self.rules_dir.is_dir():
            msg = f"rules_dir must be a directory, got: {self.rules_dir}"
            raise NotADirectoryError(msg)
        return sorted(p.stem for p in self.rules_dir.glob(f"*{RULE_SUFFIX}") if p.is_file())

    def validate(self, names: Sequence[str]) -> list[str]:
        """
        Check the requested names and return them as a list.

        Every name is checked before anything is reported, so a single error
        lists all missing rules at once.

        Raises:
            UsageError: If no names are given, a name is repeated or is not a bare file name.
            RuleNotFoundError: If any requested rule file does not exist.
        """
        names = _check_usage(names)
        missing = [name for name in names if not self.source_path(name).is_file()]
        if missing:
            raise RuleNotFoundError(missing, [str(self.source_path(n)) for n in missing])
        return names

    def title_for(self, name: str) -> str:
        """Read only the first line of a rule and derive its title."""
        title, fell_back = self._title(name)
        if fell_back:
            warnings.warn(
                f"No heading found in {self.source_path(name)}, using '{name}' as description",
                UserWarning,
                stacklevel=2,
            )
        return title

    def _title(self, name: str) -> tuple[str, bool]:
        first_line = _read_first_line(self.source_path(name))
        line = first_line.rstrip("\r\n")
        fell_back = not line.startswith("#") or not line[1:].strip()
        return extract_title(first_line, name), fell_back

    def render(self, names: Sequence[str]) -> dict[Path, bytes]:
        """
        Build the full output set in memory without touching the output root.

        Source content is kept as bytes and never decoded, so any encoding or
        line ending passes through unchanged.

        Args:
            names: Ordered rule names.

        Returns:
            Mapping of output-root-relative path to file content, rules first
            in input order, then the combined outputs.

        Raises:
            UsageError: If no names are given, a name is repeated or is not a bare file name.
            RuleNotFoundError: If any requested rule file does not exist.
        """
        return self._render(names)

    def _render(self, names: Sequence[str]) -> dict[Path, bytes]:
        # Called directly from render, deploy and check: stacklevel=3 is their caller
        names = self.validate(names)

        outputs: dict[Path, bytes] = {}
        contents = []
        for name in names:
            path = self.source_path(name)
            content = path.read_bytes()
            if not content:
                warnings.warn(f"Rule file is empty: {path}", UserWarning, stacklevel=3)

            title, fell_back = self._title(name)
            if fell_back:
                warnings.warn(
                    f"No heading found in {path}, using '{name}' as description",
                    UserWarning,
                    stacklevel=3,
                )
            outputs[CURSOR_RULES_DIR / name / RULE_FILENAME] = (
                render_frontmatter(title).encode("utf-8") + content
            )
            contents.append(content)

        combined = COMBINED_SEPARATOR.encode("utf-8").join(contents)
        for target in COMBINED_OUTPUTS:
            outputs[target] = combined
        return outputs

    def deploy(
        self,
        names: Sequence[str],
        echo: Callable[[str], None] | None = None,
    ) -> list[Path]:
        """
        Rebuild the output root from the given rules.

        The output root is removed first. If anything fails after that, it is
        removed again so no partial deployment is left behind.

        Args:
            names: Ordered rule names.
            echo: Optional callback receiving one progress line per written file.

        Returns:
            The paths written, in the order they were written.

        Raises:
            UsageError: If no names are given, a name is repeated or is not a bare
                file name. Nothing is touched.
            RuleNotFoundError: If any requested rule file does not exist.
            DeploymentError: If reading the sources or writing the output fails.
        """
        names = _check_usage(names)
        emit = echo or (lambda _line: None)

        emit(f"Clearing {self.dist_dir} directory...")
        self._clear()
        written = []
        try:
            (self.dist_dir / CURSOR_RULES_DIR).mkdir(parents=True)
            outputs = self._render(names)

            emit("Processing rule files...")
            for relative, content in outputs.items():
                target = self.dist_dir / relative
                _write_bytes(target, content)
                written.append(target)
                if relative.name == RULE_FILENAME:
                    emit(f"  ✓ Created rule: {target}")
                else:
                    emit(f"Deploying rules to {target}...")
        except RuleDeployError:
            self._clear()
            raise
        except OSError as e:
            self._clear()
            msg = f"Failed to deploy rules to {self.dist_dir}: {e}"
            raise DeploymentError(msg) from e
        except Exception:
            self._clear()
            raise

        return written

    def check(self, names: Sequence[str]) -> list[str]:
        """
        Compare the output root with what deploy would write.

        Args:
            names: Ordered rule names.

        Returns:
            One message per missing, unexpected or out-of-date file. Empty when
            the output root is up to date.
        """
        expected = self._render(names)
        problems = []

        for relative, content in expected.items():
            target = self.dist_dir / relative
            if not target.is_file():
                problems.append(f"{target} is missing")
                continue
            actual = target.read_bytes()
            if actual == content:
                continue
            if relative.name == RULE_FILENAME:
                problems.extend(self._compare_rule(target, content, actual))
            else:
                problems.append(f"{target} is out of date")

        rules_root = self.dist_dir / CURSOR_RULES_DIR
        if rules_root.is_dir():
            for found in sorted(rules_root.rglob("*")):
                if found.is_file() and found.relative_to(self.dist_dir) not in expected:
                    problems.append(f"{found} is not part of this deployment")

        return problems

    def _compare_rule(self, target: Path, expected: bytes, actual: bytes) -> list[str]:
        """Describe how a deployed RULE.md differs from the expected one."""
        expected_body, expected_meta = parse_frontmatter(expected.decode("utf-8", errors="replace"))
        actual_body, actual_meta = parse_frontmatter(actual.decode("utf-8", errors="replace"))

        if actual_meta is None:
            return [f"{target} has no valid frontmatter"]

        problems = []
        for key in expected_meta or {}:
            if actual_meta.get(key) != expected_meta[key]:
                problems.append(
                    f"{target}: {key} is {actual_meta.get(key)!r}, "
                    f"expected {expected_meta[key]!r}"
                )
        if actual_body != expected_body:
            problems.append(f"{target}: content differs from source")
        if not problems:
            # Same data, different formatting
            problems.append(f"{target} is out of date")
        return problems

    def _clear(self) -> None:
        if self.dist_dir.exists():
            shutil.rmtree(self.dist_dir)
