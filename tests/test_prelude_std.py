import pytest
from pathlib import Path

from stackcalc.interpreter import Interpreter
from stackcalc.types.dictionary import UserQuotation
from stackcalc.types.errors import DomainError, EmptySequence
from stackcalc.types.values import Sequence


@pytest.fixture(scope="module")
def std_source():
    root = Path(__file__).resolve().parents[1]
    return (root / "stackcalc" / "prelude" / "std.calc").read_text(encoding="utf-8")


def eval_calc(itp: Interpreter, code: str):
    itp.reset()
    return itp.eval(code)


def test_prelude_loads_explicitly(std_source):
    itp = Interpreter(prelude=std_source)
    assert isinstance(itp.dictionary.lookup("range"), UserQuotation)
    assert itp.stack.items == []


@pytest.mark.parametrize(
    "source,expected",
    [
        ("3 4 add", 7),
        ("5 ++", 6),
        ("5 --", 4),
        ("-3 sign", -1),
        ("7 sign", 1),
        ("0 sign", 0),
        ("3 3 eq", 1),
        ("3 4 eq", 0),
        ("5 3 gt", 1),
        ("3 5 gt", 0),
        ("5 !", 120),
        ("0 !", 1),
        ("5 2 choose", 10),
        ("[1 2 3] avg", 2),
    ]
)
def test_scenarios(interp, source, expected):
    assert eval_calc(interp, source) == expected


@pytest.mark.parametrize(
    "source,expected",
    [
        ("2 6 range", Sequence((2, 3, 4, 5))),
        ("3 3 range", Sequence()),
        ("5 2 range", Sequence()),
        ("5 seq", Sequence((1, 2, 3, 4, 5))),
        ("1 seq", Sequence((1,))),
        ("0 seq", Sequence()),
        ("4 iota", Sequence((0, 1, 2, 3))),
        ("[ 1 2 3 4 ] evens", Sequence((2, 4))),
        ("[ 1 2 3 4 ] odds", Sequence((1, 3))),
    ]
)
def test_sequence_builders(interp, source, expected):
    assert eval_calc(interp, source) == expected


def test_range_leaves_rest_of_stack_alone(interp):
    interp.reset()
    interp.load("99 1 4 range")
    assert interp.stack.items == [99, Sequence((1, 2, 3))]


@pytest.mark.parametrize(
    "source,expected",
    [
        ("[ 2 3 4 ] product", 24),
        ("[ 3 9 4 ] maximum", 9),
        ("[ 3 9 4 ] minimum", 3),
        ("[ 3 9 4 ] first", 3),
        ("[ 3 9 4 ] last", 4),
        ("[ 1 2 3 ] sumsq", 14),
        ("[ 2 4 ] mean", 3),
        ("[ 1 2 3 4 ] { 2 gt } count", 2),
        ("[ 1 2 3 ] { 2 gt } any", 1),
        ("[ 1 2 3 ] { 5 gt } any", 0),
        ("[ 1 2 3 ] { 0 gt } all", 1),
        ("[ 1 2 3 ] { 1 gt } all", 0),
        ("[ 1 2 3 ] size", 3),
    ]
)
def test_sequence_words(interp, source, expected):
    assert eval_calc(interp, source) == expected


@pytest.mark.parametrize("source", ["[ ] avg", "[ ] maximum", "[ ] first"])
def test_empty_sequence_words(interp, source):
    with pytest.raises(EmptySequence):
        eval_calc(interp, source)


@pytest.mark.parametrize(
    "source,expected",
    [
        ("3 neg", -3),
        ("-4 abs", 4),
        ("4 abs", 4),
        ("6 double", 12),
        ("5 half", 2.5),
        ("4 recip", 0.25),
        ("3 square", 9),
        ("2 cube", 8),
        ("9 sqrt", 3),
        ("0 not", 1),
        ("2 not", 0),
        ("1 2 ne", 1),
        ("1 2 lt", 1),
        ("2 2 ge", 1),
        ("3 2 le", 0),
        ("1 0 and", 0),
        ("1 1 and", 1),
        ("1 0 or", 1),
        ("0 0 or", 0),
        ("4 even", 1),
        ("4 odd", 0),
        ("15 0 20 clamp", 15),
        ("25 0 20 clamp", 20),
        ("-5 0 20 clamp", 0),
        ("10 fib", 55),
        ("0 fib", 0),
        ("12 18 gcd", 6),
        ("7 0 gcd", 7),
        ("4 6 lcm", 12),
        ("2 3 +", 5),
        ("2 3 -", -1),
        ("2 3 *", 6),
        ("3 2 /", 1.5),
        ("7 2 %", 1),
        ("2 3 ^", 8),
    ]
)
def test_number_words(interp, source, expected):
    assert eval_calc(interp, source) == expected


def test_logarithm_words(interp):
    assert eval_calc(interp, "e ln") == pytest.approx(1.0)
    assert eval_calc(interp, "1000 log10") == pytest.approx(3.0)
    with pytest.raises(DomainError):
        eval_calc(interp, "-4 sqrt")


def test_stack_helpers(interp):
    interp.reset()
    interp.load("1 2 nip")
    assert interp.stack.items == [2]
    interp.reset()
    interp.load("1 2 tuck")
    assert interp.stack.items == [2, 1, 2]
    interp.reset()
    interp.load("1 2 2dup")
    assert interp.stack.items == [1, 2, 1, 2]
    interp.reset()
    interp.load("1 2 3 2pop")
    assert interp.stack.items == [1]


def test_when_unless(interp):
    assert eval_calc(interp, "5 1 { 1 add } when") == 6
    assert eval_calc(interp, "5 0 { 1 add } when") == 5
    assert eval_calc(interp, "5 0 { 1 add } unless") == 6
    assert eval_calc(interp, "5 1 { 1 add } unless") == 5


def test_peek_prints_and_keeps(make_io_interp, std_source):
    itp, out = make_io_interp()
    itp.load(std_source)
    assert itp.eval("5 peek") == 5
    assert out.getvalue() == "5\n"
