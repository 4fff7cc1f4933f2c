from o2o_shop.core.pagination import calculate_row_index


def test_first_page_starts_at_zero():
    assert calculate_row_index(1, 10) == 0


def test_second_page_offset():
    assert calculate_row_index(2, 10) == 10
    assert calculate_row_index(3, 25) == 50


def test_non_positive_page_is_first_page():
    assert calculate_row_index(0, 10) == 0
    assert calculate_row_index(-3, 10) == 0
