from xvutils.rand import ParkMiller, do_rand


def test_first_value_from_default_seed():
    assert ParkMiller().rand() == 33613


def test_matches_modular_definition():
    for seed in (0, 1, 2, 12345, 0x7FFFFFFD, 2**40 + 7):
        x = seed % 0x7FFFFFFE + 1
        assert do_rand(seed) + 1 == (16807 * x) % 0x7FFFFFFF


def test_output_range():
    gen = ParkMiller(state=987654321)
    for _ in range(2000):
        value = gen.rand()
        assert 0 <= value <= 0x7FFFFFFD


def test_state_is_output():
    gen = ParkMiller(state=42)
    value = gen.rand()
    assert gen.state == value
    assert gen.rand() == do_rand(value)


def test_seeds_equal_modulo():
    assert do_rand(0) == do_rand(0x7FFFFFFE)


def test_state_wraps_at_64_bits():
    assert do_rand(2**64 + 5) == do_rand(5)


def test_different_seeds_differ():
    a = ParkMiller(state=1 ^ 31)
    b = ParkMiller(state=1 ^ 7177)
    assert [a.rand() for _ in range(5)] != [b.rand() for _ in range(5)]