"""CLI tests for git-squash-tree, via Typer's CliRunner.

Commands that touch a repository run inside a temporary real repository.
"""

import pytest
from typer.testing import CliRunner

from squash_tree.cli import app, normalize_args, run
from squash_tree.hooks.installer import HOOK_NAMES, HookInstaller
from tests.conftest import git, make_commit, requires_git


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def repo(temp_git_repo, monkeypatch):
    monkeypatch.chdir(temp_git_repo)
    return temp_git_repo


def short(repo, ref):
    return git(repo, "rev-parse", "--short", ref)


@pytest.fixture
def squashed(repo):
    """Three commits squashed into one with reset --soft; returns refs by name."""
    base = git(repo, "rev-parse", "HEAD")
    children = [make_commit(repo, name) for name in ("c1", "c2", "c3")]
    git(repo, "reset", "-q", "--soft", base)
    git(repo, "commit", "-q", "-m", "squashed")
    root = git(repo, "rev-parse", "HEAD")
    return {"base": base, "children": children, "root": root}


# ---------------------------------------------------------------------------
# Argument handling
# ---------------------------------------------------------------------------


class TestArguments:

    def test_bare_commit_means_show(self):
        assert normalize_args(["HEAD"]) == ["show", "HEAD"]
        assert normalize_args(["a1b2c3d"]) == ["show", "a1b2c3d"]

    def test_commands_untouched(self):
        assert normalize_args(["init", "--global"]) == ["init", "--global"]
        assert normalize_args(["add-metadata", "--root=x"]) == ["add-metadata", "--root=x"]
        assert normalize_args(["--version"]) == ["--version"]
        assert normalize_args([]) == []

    def test_no_args_prints_usage_and_fails(self, runner):
        result = runner.invoke(app, [])
        assert result.exit_code == 1
        assert "Usage:" in result.output

    def test_help(self, runner):
        result = runner.invoke(app, ["help"])
        assert result.exit_code == 0
        assert "git squash-tree init [--global]" in result.output

    def test_version(self, runner):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_short_help_option(self, runner):
        result = runner.invoke(app, ["-h"])
        assert result.exit_code == 0
        assert "add-metadata" in result.output

        result = runner.invoke(app, ["show", "-h"])
        assert result.exit_code == 0


class TestEntryPoint:
    """Exit status and error format of the console script."""

    def test_unknown_option(self, capsys):
        with pytest.raises(SystemExit) as exc:
            run(["add-metadata", "--bogus"])

        assert exc.value.code == 1
        err = capsys.readouterr().err
        assert "Error:" in err
        assert "No such option: --bogus" in err
        assert "╭" not in err

    def test_extra_argument(self, capsys):
        with pytest.raises(SystemExit) as exc:
            run(["show", "HEAD", "extra"])

        assert exc.value.code == 1
        err = capsys.readouterr().err
        assert "Error:" in err
        assert "unexpected extra argument" in err

    def test_no_args(self, capsys):
        with pytest.raises(SystemExit) as exc:
            run([])

        assert exc.value.code == 1
        assert "Usage:" in capsys.readouterr().err

    def test_short_help_succeeds(self, capsys):
        run(["-h"])
        assert "Usage" in capsys.readouterr().out

    def test_version_succeeds(self, capsys):
        run(["--version"])
        assert "0.1.0" in capsys.readouterr().out


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


@requires_git
class TestShow:

    def test_commit_without_metadata(self, runner, repo):
        result = runner.invoke(app, ["show", "HEAD"])
        assert result.exit_code == 0
        assert result.output == f"{short(repo, 'HEAD')}\n"

    def test_squash_tree(self, runner, repo, squashed):
        children = ",".join(squashed["children"])
        runner.invoke(app, ["add-metadata", "--root=HEAD", f"--base={squashed['base']}", f"--children={children}"])

        result = runner.invoke(app, ["show", "HEAD"])

        assert result.exit_code == 0
        c1, c2, c3 = (short(repo, c) for c in squashed["children"])
        assert result.output == (
            f"{short(repo, 'HEAD')} (squash, base: {short(repo, squashed['base'])})\n"
            f"├── {c1}\n"
            f"├── {c2}\n"
            f"└── {c3}\n"
        )

    def test_unknown_commit(self, runner, repo):
        result = runner.invoke(app, ["show", "no-such-ref"])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_outside_repository(self, runner, tmp_path, monkeypatch):
        outside = tmp_path / "outside"
        outside.mkdir()
        monkeypatch.chdir(outside)

        result = runner.invoke(app, ["show", "HEAD"])

        assert result.exit_code == 1
        assert "Error:" in result.output


# ---------------------------------------------------------------------------
# add-metadata
# ---------------------------------------------------------------------------


@requires_git
class TestAddMetadata:

    def test_records_note(self, runner, repo, squashed):
        children = ",".join(squashed["children"])
        result = runner.invoke(
            app,
            ["add-metadata", "--root=HEAD", f"--base={squashed['base']}", f"--children={children}", "--strategy=manual"],
        )

        assert result.exit_code == 0
        assert "Recorded squash" in result.output
        note = git(repo, "notes", "--ref=squash-tree", "show", "HEAD")
        assert '"strategy": "manual"' in note

    def test_second_call_is_noop(self, runner, repo, squashed):
        c1, c2, c3 = squashed["children"]
        runner.invoke(app, ["add-metadata", "--root=HEAD", f"--base={squashed['base']}", f"--children={c1},{c2}"])
        result = runner.invoke(app, ["add-metadata", "--root=HEAD", f"--base={squashed['base']}", f"--children={c3}"])

        assert result.exit_code == 0
        assert "already recorded" in result.output
        note = git(repo, "notes", "--ref=squash-tree", "show", "HEAD")
        assert short(repo, c3) not in note

    def test_missing_flags(self, runner, repo):
        result = runner.invoke(app, ["add-metadata", "--root=HEAD"])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_invalid_child(self, runner, repo):
        result = runner.invoke(app, ["add-metadata", "--root=HEAD", "--base=HEAD", "--children=nope"])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_invalid_strategy(self, runner, repo, squashed):
        result = runner.invoke(
            app,
            ["add-metadata", "--root=HEAD", f"--base={squashed['base']}", f"--children={squashed['children'][0]}", "--strategy=later"],
        )
        assert result.exit_code == 1
        assert "Error:" in result.output


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------


@requires_git
class TestInit:

    def test_repo_hooks(self, runner, repo):
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        for name in HOOK_NAMES:
            assert HookInstaller.is_ours(repo / ".git" / "hooks" / name)

    def test_global_hooks(self, runner, repo, tmp_path, monkeypatch):
        hooks_dir = tmp_path / "global-hooks"
        monkeypatch.setenv("SQUASH_TREE_HOOKS_DIR", str(hooks_dir))

        result = runner.invoke(app, ["init", "--global"])

        assert result.exit_code == 0
        assert HookInstaller.is_ours(hooks_dir / "post-rewrite")
        assert git(repo, "config", "--global", "core.hooksPath") == str(hooks_dir)

    def test_outside_repository(self, runner, tmp_path, monkeypatch):
        outside = tmp_path / "outside"
        outside.mkdir()
        monkeypatch.chdir(outside)

        result = runner.invoke(app, ["init"])

        assert result.exit_code == 1
        assert "Error:" in result.output


# ---------------------------------------------------------------------------
# hook entry points
# ---------------------------------------------------------------------------


@requires_git
class TestHookCommands:

    def test_post_rewrite_records_squash(self, runner, repo, squashed):
        old_tip = squashed["children"][-1]
        result = runner.invoke(app, ["hook", "post-rewrite", "amend"], input=f"{old_tip} {squashed['root']}\n")

        assert result.exit_code == 0
        shown = runner.invoke(app, ["show", squashed["root"]])
        lines = shown.output.splitlines()
        assert lines[0].endswith(f"(squash, base: {short(repo, squashed['base'])})")
        assert len(lines) == 4

    def test_rebase_snapshot_round_trip(self, runner, repo, squashed):
        base = squashed["base"]
        old_tip = squashed["children"][-1]
        git(repo, "branch", "before", old_tip)

        runner.invoke(app, ["hook", "pre-rebase", base, "before"])
        assert (repo / ".git" / "squash-tree" / "pending-rewrite.json").exists()

        result = runner.invoke(app, ["hook", "post-rewrite", "rebase"], input=f"{old_tip} {squashed['root']}\n")

        assert result.exit_code == 0
        assert not (repo / ".git" / "squash-tree" / "pending-rewrite.json").exists()
        note = git(repo, "notes", "--ref=squash-tree", "show", squashed["root"])
        for child in squashed["children"]:
            assert short(repo, child) in note

    def test_hooks_never_fail(self, runner, repo):
        result = runner.invoke(app, ["hook", "post-rewrite", "rebase"], input="garbage\nnot a pair at all\n")
        assert result.exit_code == 0
        assert runner.invoke(app, ["hook", "pre-rebase", "no-such-ref"]).exit_code == 0
        assert runner.invoke(app, ["hook", "post-merge", "1"]).exit_code == 0
        assert runner.invoke(app, ["hook", "prepare-commit-msg", "MSG", "squash"]).exit_code == 0
        assert runner.invoke(app, ["hook", "post-commit"]).exit_code == 0

    def test_hooks_outside_repository(self, runner, tmp_path, monkeypatch):
        outside = tmp_path / "outside"
        outside.mkdir()
        monkeypatch.chdir(outside)

        assert runner.invoke(app, ["hook", "post-merge", "1"]).exit_code == 0
