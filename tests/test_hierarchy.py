"""
Tests for parent-reference traversal
"""
import pytest

from blockyrig.converters.hierarchy import child_bones, order_bones, preorder
from blockyrig.exceptions import StructuralError
from blockyrig.schema import Bone


def bone(name, parent=None):
    return Bone(name=name, parent=parent, pivot=[0, 0, 0])


class TestOrderBones:
    """Test order_bones"""

    def test_parent_before_child(self):
        bones = [bone('hand', 'arm'), bone('arm', 'body'), bone('body'), bone('leg', 'body')]
        assert [b.name for b in order_bones(bones)] == ['body', 'arm', 'hand', 'leg']

    def test_multiple_roots_keep_input_order(self):
        bones = [bone('b'), bone('a'), bone('b1', 'b')]
        assert [b.name for b in order_bones(bones)] == ['b', 'b1', 'a']

    def test_dangling_parent(self):
        with pytest.raises(StructuralError) as exc_info:
            order_bones([bone('body'), bone('arm', 'torso')])
        assert exc_info.value.node == 'arm'
        assert 'torso' in str(exc_info.value)

    def test_self_parent_is_cycle(self):
        with pytest.raises(StructuralError):
            order_bones([bone('body'), bone('loop', 'loop')])

    def test_cycle_without_root(self):
        with pytest.raises(StructuralError, match='cycle'):
            order_bones([bone('a', 'b'), bone('b', 'a')])

    def test_duplicate_names(self):
        with pytest.raises(StructuralError, match='Duplicate'):
            order_bones([bone('a'), bone('a')])


class TestPreorder:
    """Test the generic traversal"""

    def test_empty(self):
        assert preorder([], key=lambda x: x, parent=lambda x: None) == []

    def test_deep_chain_is_iterative(self):
        items = [(str(i), str(i - 1) if i else None) for i in range(5000)]
        ordered = preorder(items, key=lambda x: x[0], parent=lambda x: x[1])
        assert [k for k, _ in ordered] == [str(i) for i in range(5000)]


class TestChildBones:
    """Test child_bones"""

    def test_children_in_input_order(self):
        children = child_bones([bone('body'), bone('r_arm', 'body'), bone('l_arm', 'body')])
        assert [b.name for b in children['body']] == ['r_arm', 'l_arm']
        assert children['r_arm'] == []
