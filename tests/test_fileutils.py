import io
import os

from xvutils.fileutils import (
    DIRSIZ,
    fmtname,
    kill_main,
    ln_main,
    ls,
    ls_main,
    mkdir_main,
    rm_main,
)


def test_fmtname_pads_last_component():
    name = fmtname("a/b/cat")
    assert name == "cat".ljust(DIRSIZ)
    assert len(name) == DIRSIZ


def test_fmtname_long_name_unchanged():
    assert fmtname("dir/12345678901234") == "12345678901234"


def test_fmtname_without_slash():
    assert fmtname("x").strip() == "x"


def test_ls_file(tmp_path):
    f = tmp_path / "data"
    f.write_bytes(b"abc")
    out, err = io.StringIO(), io.StringIO()
    ls(str(f), out, err)
    st = os.stat(f)
    assert out.getvalue() == f"{fmtname(str(f))} 2 {st.st_ino} 3\n"
    assert err.getvalue() == ""


def test_ls_directory(tmp_path):
    (tmp_path / "f").write_bytes(b"hello")
    (tmp_path / "sub").mkdir()
    out, err = io.StringIO(), io.StringIO()
    ls(str(tmp_path), out, err)
    lines = out.getvalue().splitlines()
    assert len(lines) == 4
    assert lines[0].startswith(".".ljust(DIRSIZ) + " 1 ")
    assert lines[1].startswith("..".ljust(DIRSIZ) + " 1 ")
    assert lines[2].startswith("f".ljust(DIRSIZ) + " 2 ")
    assert lines[2].endswith(" 5")
    assert lines[3].startswith("sub".ljust(DIRSIZ) + " 1 ")


def test_ls_missing(tmp_path):
    path = str(tmp_path / "nope")
    out, err = io.StringIO(), io.StringIO()
    ls(path, out, err)
    assert err.getvalue() == f"ls: cannot open {path}\n"
    assert out.getvalue() == ""


def test_ls_path_too_long(tmp_path):
    path = str(tmp_path) + "/." * 250
    out = io.StringIO()
    ls(path, out, io.StringIO())
    assert out.getvalue() == "ls: path too long\n"


def test_ls_main_lists_cwd(tmp_path, monkeypatch, capsys):
    (tmp_path / "item").write_bytes(b"")
    monkeypatch.chdir(tmp_path)
    assert ls_main([]) == 0
    assert "item".ljust(DIRSIZ) + " 2 " in capsys.readouterr().out


def test_ln_creates_link(tmp_path):
    src = tmp_path / "a"
    src.write_bytes(b"x")
    dst = tmp_path / "b"
    assert ln_main([str(src), str(dst)]) == 0
    assert os.stat(dst).st_ino == os.stat(src).st_ino


def test_ln_failure_reports(tmp_path, capsys):
    src = tmp_path / "a"
    src.write_bytes(b"x")
    assert ln_main([str(src), str(src)]) == 0
    assert capsys.readouterr().err == f"link {src} {src}: failed\n"


def test_ln_usage(capsys):
    assert ln_main(["only"]) == 1
    assert capsys.readouterr().err == "Usage: ln old new\n"


def test_mkdir_creates_all(tmp_path):
    a, b = tmp_path / "a", tmp_path / "b"
    assert mkdir_main([str(a), str(b)]) == 0
    assert a.is_dir() and b.is_dir()


def test_mkdir_stops_at_failure(tmp_path, capsys):
    a, b = tmp_path / "a", tmp_path / "b"
    a.mkdir()
    assert mkdir_main([str(a), str(b)]) == 0
    assert capsys.readouterr().err == f"mkdir: {a} failed to create\n"
    assert not b.exists()


def test_mkdir_usage(capsys):
    assert mkdir_main([]) == 1
    assert capsys.readouterr().err == "Usage: mkdir files...\n"


def test_rm_file_and_empty_dir(tmp_path):
    f = tmp_path / "f"
    f.write_bytes(b"")
    d = tmp_path / "d"
    d.mkdir()
    assert rm_main([str(f), str(d)]) == 0
    assert not f.exists() and not d.exists()


def test_rm_stops_at_failure(tmp_path, capsys):
    missing = tmp_path / "missing"
    f = tmp_path / "f"
    f.write_bytes(b"")
    assert rm_main([str(missing), str(f)]) == 0
    assert capsys.readouterr().err == f"rm: {missing} failed to delete\n"
    assert f.exists()


def test_rm_refuses_nonempty_dir(tmp_path, capsys):
    d = tmp_path / "d"
    d.mkdir()
    (d / "x").write_bytes(b"")
    rm_main([str(d)])
    assert "failed to delete" in capsys.readouterr().err
    assert d.is_dir()


def test_kill_usage(capsys):
    assert kill_main([]) == 1
    assert capsys.readouterr().err == "usage: kill pid...\n"


def test_kill_ignores_bad_pids():
    assert kill_main(["0", "abc", "99999999"]) == 0