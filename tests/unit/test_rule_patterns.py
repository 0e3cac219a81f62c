import pytest

from medreport.rules.patterns import find_route, lab_flag, normalize_mdy


class TestNormalizeMdy:
    def test_four_digit_year(self) -> None:
        assert normalize_mdy("1", "15", "1980") == "1980-01-15"

    def test_two_digit_year(self) -> None:
        assert normalize_mdy("03", "04", "21") == "2021-03-04"

    def test_three_digit_year_rejected(self) -> None:
        assert normalize_mdy("03", "04", "198") is None

    def test_leap_day(self) -> None:
        assert normalize_mdy("2", "29", "2024") == "2024-02-29"
        assert normalize_mdy("2", "29", "2023") is None


class TestLabFlag:
    @pytest.mark.parametrize(
        ("value", "ref_range", "flag"),
        [
            (3.0, "4-10", "low"),
            (11.0, "4-10", "high"),
            (4.0, "4-10", "normal"),
            (10.0, "4-10", "normal"),
            (5.0, "4.0 – 10.0", "normal"),
            (50.0, "<40", "normal"),
            (50.0, None, "normal"),
        ],
    )
    def test_flags(self, value: float, ref_range: str | None, flag: str) -> None:
        assert lab_flag(value, ref_range) == flag


class TestFindRoute:
    def test_first_route_in_list_order(self) -> None:
        assert find_route("Ondansetron 4mg IV or oral") == "oral"

    def test_no_route(self) -> None:
        assert find_route("Metformin 500mg BID") is None

    def test_matches_inside_words(self) -> None:
        assert find_route("Trimethoprim 100mg") == "im"
