from pathlib import Path

import pytest

from rules_deployer.cli import main


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a project with a rules/ directory and make it the working directory."""
    rules = tmp_path / "rules"
    rules.mkdir()
    (rules / "alpha.md").write_text("# Alpha Guide\n\nAlpha body.\n")
    (rules / "beta.md").write_text("# Beta Guide\n\nBeta body.\n")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_deploy_with_default_directories(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test deploying into dist/ from rules/ in the working directory."""
    assert main(["alpha", "beta"]) == 0

    dist = project / "dist"
    assert (dist / ".cursor" / "rules" / "alpha" / "RULE.md").is_file()
    assert (dist / ".cursor" / "rules" / "beta" / "RULE.md").is_file()
    copilot = (dist / ".github" / "copilot-instructions.md").read_bytes()
    assert copilot == b"# Alpha Guide\n\nAlpha body.\n\n---\n\n# Beta Guide\n\nBeta body.\n"
    assert (dist / ".claude" / "CLAUDE.md").read_bytes() == copilot

    out = capsys.readouterr().out
    assert "✓ Created rule: dist/.cursor/rules/alpha/RULE.md" in out
    assert "✓ Successfully deployed rules to:" in out
    assert "    - alpha/RULE.md" in out
    assert "    - beta/RULE.md" in out
    assert "  - dist/.github/copilot-instructions.md" in out
    assert "  - dist/.claude/CLAUDE.md" in out


def test_custom_directories(tmp_path: Path) -> None:
    """Test the --rules-dir and --dist-dir options."""
    rules = tmp_path / "guides"
    rules.mkdir()
    (rules / "go.md").write_text("# Go\n")
    out_dir = tmp_path / "build"

    assert main(["--rules-dir", str(rules), "--dist-dir", str(out_dir), "go"]) == 0

    assert (out_dir / ".cursor" / "rules" / "go" / "RULE.md").read_text().startswith(
        '---\ndescription: "Go"\n'
    )


def test_no_arguments(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test that running without names prints usage and creates nothing."""
    assert main([]) == 1

    err = capsys.readouterr().err
    assert "Error: No filename provided" in err
    assert "Usage: deploy-rules <filename>" in err
    assert not (project / "dist").exists()


def test_missing_rule(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test that a missing rule fails and leaves no dist directory."""
    assert main(["alpha"]) == 0

    assert main(["alpha", "nope"]) == 1

    err = capsys.readouterr().err
    assert "Error: Source file 'rules/nope.md' not found" in err
    assert not (project / "dist").exists()


def test_missing_rules_dir(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test that a missing rules directory fails and removes an earlier dist."""
    assert main(["alpha"]) == 0
    assert (project / "dist" / ".github" / "copilot-instructions.md").is_file()

    assert main(["--rules-dir", "absent", "alpha"]) == 1

    assert "Error: Source file 'absent/alpha.md' not found" in capsys.readouterr().err
    assert not (project / "dist").exists()


def test_list_missing_rules_dir(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test the --list error for a rules directory that does not exist."""
    assert main(["--rules-dir", str(tmp_path / "absent"), "--list"]) == 1

    assert "rules_dir must be a directory" in capsys.readouterr().err


def test_non_utf8_rule(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test that a Latin-1 rule deploys without an error."""
    (project / "rules" / "legacy.md").write_bytes(b"# Caf\xe9 Guide\n\nAu lait.\n")

    assert main(["legacy"]) == 0

    copilot = project / "dist" / ".github" / "copilot-instructions.md"
    assert copilot.read_bytes() == b"# Caf\xe9 Guide\n\nAu lait.\n"
    assert "✓ Created rule: dist/.cursor/rules/legacy/RULE.md" in capsys.readouterr().out


def test_custom_dist_dir_in_progress(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test that the progress output names the chosen output directory."""
    assert main(["--dist-dir", "build", "alpha"]) == 0

    out = capsys.readouterr().out
    assert "Clearing build directory..." in out
    assert "  - build/.claude/CLAUDE.md" in out


def test_path_like_name(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test that a name with a path separator is a usage error."""
    assert main(["../rules/alpha"]) == 1

    err = capsys.readouterr().err
    assert "Invalid rule names" in err
    assert "Usage: deploy-rules" in err
    assert not (project / "dist").exists()


def test_list(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test that --list prints rule names without requiring any."""
    assert main(["--list"]) == 0

    assert capsys.readouterr().out.splitlines() == ["alpha", "beta"]
    assert not (project / "dist").exists()


def test_check(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test --check before and after deploying."""
    assert main(["--check", "alpha"]) == 1
    assert "is missing" in capsys.readouterr().out

    assert main(["alpha"]) == 0
    capsys.readouterr()

    assert main(["--check", "alpha"]) == 0
    assert "dist is up to date." in capsys.readouterr().out

    (project / "rules" / "alpha.md").write_text("# Alpha Guide\n\nChanged.\n")
    assert main(["--check", "alpha"]) == 1
    assert "content differs from source" in capsys.readouterr().out
