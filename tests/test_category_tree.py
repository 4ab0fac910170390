# tests/test_category_tree.py
import logging

from shopapi.utils.category_tree import build_children_index, expand_category_tree

#      1          6
#    /   \        |
#   2     3       7
#   |
#   4 - 5
TREE = {1: None, 2: 1, 3: 1, 4: 2, 5: 4, 6: None, 7: 6}


def test_children_index():
    children = build_children_index(TREE)

    assert sorted(children[1]) == [2, 3]
    assert children[4] == [5]
    assert 3 not in children


def test_expansion_contains_root_and_all_descendants():
    assert expand_category_tree(1, TREE) == {1, 2, 3, 4, 5}
    assert expand_category_tree(2, TREE) == {2, 4, 5}
    assert expand_category_tree(6, TREE) == {6, 7}


def test_leaf_expands_to_itself():
    assert expand_category_tree(5, TREE) == {5}


def test_unknown_root_expands_to_nothing():
    assert expand_category_tree(99, TREE) == set()
    assert expand_category_tree(1, {}) == set()


def test_expansion_stays_inside_the_subtree():
    for root in TREE:
        ids = expand_category_tree(root, TREE)
        for category_id in ids - {root}:
            # every member reaches the root by following parents
            current = category_id
            while current is not None and current != root:
                current = TREE[current]
            assert current == root


def test_cycle_terminates_and_is_reported(caplog):
    cyclic = {1: 3, 2: 1, 3: 2, 4: 3}

    with caplog.at_level(logging.ERROR, logger="shopapi.utils.category_tree"):
        ids = expand_category_tree(1, cyclic)

    assert ids == {1, 2, 3, 4}
    assert "category cycle detected" in caplog.text


def test_self_parent_terminates(caplog):
    with caplog.at_level(logging.ERROR):
        assert expand_category_tree(1, {1: 1, 2: 1}) == {1, 2}

    assert any(record.levelno == logging.ERROR for record in caplog.records)


def test_tree_without_cycles_logs_nothing(caplog):
    with caplog.at_level(logging.ERROR):
        expand_category_tree(1, TREE)

    assert not caplog.records
