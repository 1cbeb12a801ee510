import json

import pytest

from devshelf import cli


@pytest.fixture
def config_path(tmp_path, books):
    corpus = tmp_path / "books.json"
    corpus.write_text(
        json.dumps([b.model_dump(by_alias=True, mode="json") for b in books]),
        encoding="utf-8",
    )
    path = tmp_path / "config.yaml"
    path.write_text("corpus_file: books.json\nruntime:\n  log_level: WARNING\n", encoding="utf-8")
    return path


def run(monkeypatch, *argv):
    monkeypatch.setattr("sys.argv", ["devshelf", *map(str, argv)])
    cli.main()


def test_prints_ranked_results(monkeypatch, capsys, config_path):
    run(monkeypatch, config_path, "fluent python")
    out = capsys.readouterr().out
    lines = out.splitlines()
    assert lines[0].startswith(" 1. [2] Fluent Python")
    assert "Learning Python" in out


def test_reports_suggestion(monkeypatch, capsys, config_path):
    run(monkeypatch, config_path, "pyton")
    out = capsys.readouterr().out
    assert "Showing results for 'python' instead of 'pyton'." in out


def test_reports_no_results(monkeypatch, capsys, config_path):
    run(monkeypatch, config_path, "zzzqqq")
    assert "No results for 'zzzqqq'" in capsys.readouterr().out


def test_related_titles(monkeypatch, capsys, config_path):
    run(monkeypatch, config_path, "concrete mathematics", "--related")
    out = capsys.readouterr().out
    assert "Related to 'Concrete Mathematics':" in out
    assert "  - The Art of Computer Programming" in out


def test_missing_corpus_exits_with_error(monkeypatch, tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("corpus_file: nowhere.json\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        run(monkeypatch, path, "python")
    assert exc.value.code == 1


@pytest.mark.parametrize(
    "content",
    ["corpus_file: [unclosed\n", "- just\n- a list\n", "plain string\n"],
)
def test_malformed_config_exits_with_error(monkeypatch, tmp_path, content):
    path = tmp_path / "config.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        run(monkeypatch, path, "python")
    assert exc.value.code == 1
