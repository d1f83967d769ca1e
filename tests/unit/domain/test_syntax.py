from atip_lint.domain.syntax import find_nearest_node, find_node, position_at
from atip_lint.infrastructure.gateways.json_syntax_gateway import JsonSyntaxGateway

TEXT = '{\n  "commands": {\n    "sync": {"options": [{"flags": ["-o"]}]}\n  }\n}'


def _root():
    return JsonSyntaxGateway().parse(TEXT).root


def test_find_node_follows_object_keys_and_array_indices() -> None:
    node = find_node(_root(), ("commands", "sync", "options", 0, "flags", 0))

    assert node is not None
    assert node.value == "-o"


def test_find_node_does_not_index_objects_with_integers() -> None:
    assert find_node(_root(), ("commands", 0)) is None
    assert find_node(_root(), ("commands", "sync", "options", "0")) is None


def test_find_node_out_of_range_index() -> None:
    assert find_node(_root(), ("commands", "sync", "options", 3)) is None


def test_find_nearest_node_falls_back_to_deepest_ancestor() -> None:
    root = _root()
    nearest = find_nearest_node(root, ("commands", "sync", "effects", "reversible"))

    assert nearest == find_node(root, ("commands", "sync"))


def test_find_nearest_node_without_tree() -> None:
    assert find_nearest_node(None, ("name",)) is None


def test_position_at_is_one_based() -> None:
    assert position_at(TEXT, 0) == (1, 1)
    assert position_at(TEXT, TEXT.index('"commands"')) == (2, 3)
    assert position_at(TEXT, TEXT.index('"sync"')) == (3, 5)


def test_position_at_clamps_offset() -> None:
    assert position_at("ab", 99) == (1, 3)
