import io

from xvutils.wc import Counts, count, main, wc


def test_count_text():
    text = "hello world\nfoo\n"
    assert count(io.StringIO(text)) == Counts(lines=2, words=3, chars=len(text))


def test_count_empty():
    assert count(io.StringIO("")) == Counts()


def test_count_bytes_counts_each_byte():
    data = "héllo\n".encode("utf-8")
    result = count(io.BytesIO(data))
    assert result.chars == len(data)
    assert result.words == 1


def test_nul_separates_words():
    assert count(io.BytesIO(b"a\0b")).words == 2


def test_all_separators():
    result = count(io.StringIO(" \r\t\n\v"))
    assert result.words == 0
    assert result.lines == 1


def test_large_input_spans_chunks():
    text = "word " * 1000
    result = count(io.StringIO(text))
    assert result.words == 1000
    assert result.chars == len(text)


def test_wc_output_line():
    out = io.StringIO()
    result = wc(io.StringIO("a b\nc\n"), "name", out)
    assert out.getvalue() == f"{result.lines} {result.words} {result.chars} name\n"


def test_main_files(tmp_path, capsys):
    path = tmp_path / "f.txt"
    path.write_bytes(b"one two\nthree\n")
    assert main([str(path)]) == 0
    assert capsys.readouterr().out == f"2 3 14 {path}\n"


def test_main_missing_file(tmp_path, capsys):
    missing = tmp_path / "missing"
    assert main([str(missing)]) == 1
    assert capsys.readouterr().out == f"wc: cannot open {missing}\n"