"""Tests for foreign-key inference and name-field detection."""

from record_graph.inference import (
    PALETTE,
    build_table_index,
    detect_name_field,
    detect_tables,
    prettify_name,
    resolve_fk_target,
    table_entries,
)


def test_prettify_name():
    assert prettify_name('order_items') == 'Order Items'
    assert prettify_name('users') == 'Users'


def test_table_entries_keeps_only_non_empty_lists_in_order():
    data = {'b': [{'id': 1}], 'meta': {'x': 1}, 'empty': [], 'a': [{'id': 2}], 'n': 3}
    assert table_entries(data) == ['b', 'a']


def test_index_contains_singular_and_plural_variants():
    index = build_table_index(['users', 'boxes', 'Line Items'])
    assert index['users'] == 'users'
    assert index['user'] == 'users'
    assert index['boxe'] == 'boxes'
    assert index['box'] == 'boxes'
    assert index['line items'] == 'Line Items'
    assert index['line_items'] == 'Line Items'
    assert index['line item'] == 'Line Items'
    assert resolve_fk_target('line_item_id', index) == 'Line Items'


def test_resolve_plural_table_from_singular_prefix():
    index = build_table_index(['users', 'orders'])
    assert resolve_fk_target('user_id', index) == 'users'
    assert resolve_fk_target('order_id', index) == 'orders'


def test_resolve_singular_table_from_plural_prefix():
    index = build_table_index(['category'])
    assert resolve_fk_target('categorys_id', index) == 'category'


def test_resolve_matches_case_insensitively():
    index = build_table_index(['Users'])
    assert resolve_fk_target('USER_id', index) == 'Users'


def test_non_fk_fields_are_ignored():
    index = build_table_index(['users'])
    assert resolve_fk_target('id', index) is None
    assert resolve_fk_target('userid', index) is None
    assert resolve_fk_target('manager_id', index) is None


def test_first_declared_table_wins_ambiguous_names():
    # "user" is claimed by whichever table appears first
    assert resolve_fk_target('user_id', build_table_index(['user', 'users'])) == 'user'
    assert resolve_fk_target('user_id', build_table_index(['users', 'user'])) == 'users'


def test_name_field_priority_order():
    fields = ['id', 'email', 'title']
    assert detect_name_field(fields, {'id': 1, 'email': 'a@b.c', 'title': 'T'}) == 'title'


def test_name_field_falls_back_to_first_short_string():
    sample = {'id': 'abc', 'created_at': 'yesterday', 'count': 4, 'code': 'X-1', 'note': 'later'}
    assert detect_name_field(list(sample), sample) == 'code'


def test_name_field_skips_long_and_empty_strings():
    sample = {'id': 1, 'blank': '', 'body': 'x' * 80, 'tag': 'ok'}
    assert detect_name_field(list(sample), sample) == 'tag'


def test_name_field_falls_back_to_id():
    sample = {'id': 1, 'amount': 3.5, 'updated_at': 'today'}
    assert detect_name_field(list(sample), sample) == 'id'


def test_detect_tables_uses_first_record_as_schema():
    data = {
        'orders': [{'id': 1}, {'id': 2, 'user_id': 1}],
        'users': [{'id': 1, 'name': 'A'}],
    }
    tables = detect_tables(data)
    assert tables['orders'].fk_fields == []
    assert tables['users'].name_field == 'name'


def test_detect_tables_records_fk_targets():
    data = {
        'users': [{'id': 1}],
        'orders': [{'id': 1, 'user_id': 1, 'coupon_id': 3}],
    }
    orders = detect_tables(data)['orders']
    assert orders.fk_fields == ['user_id']
    assert orders.fk_targets == {'user_id': 'users'}


def test_detect_tables_skips_empty_tables():
    tables = detect_tables({'users': [{'id': 1}], 'logs': []})
    assert list(tables) == ['users']


def test_colors_cycle_through_palette():
    data = {f't{i}': [{'id': 1}] for i in range(len(PALETTE) + 2)}
    tables = detect_tables(data)
    assert tables['t0'].color == PALETTE[0]
    assert tables[f't{len(PALETTE)}'].color == PALETTE[0]
    assert tables[f't{len(PALETTE) + 1}'].color == PALETTE[1]
    assert tables['t0'].label == 'T0'
