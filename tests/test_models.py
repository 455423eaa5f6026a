import logging
import pytest
from cloudtree.models import Node, ViewContext, ROOT, FILE, DIR
from cloudtree.node_store import NodeStore
from cloudtree.error_handling import handle_error, log_operation, NodeNotFoundError


class TestNode:
    def test_wire_format(self):
        data = {"id": "n1", "parent": "r", "type": FILE, "name": "a.txt",
                "size": 4, "marked": True, "color": "#fff", "lastModified": 1700000000000}
        node = Node.from_dict(data)

        assert node.last_modified == 1700000000000
        assert node.to_dict() == data

    def test_defaults_and_transient_fields(self):
        node = Node.from_dict({"id": "d", "parent": ROOT, "type": DIR, "name": "root"})
        node.selected = True

        assert node.is_directory
        assert node.to_dict() == {"id": "d", "parent": ROOT, "type": DIR, "name": "root",
                                  "size": 0, "marked": False, "color": "", "lastModified": 0}

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            Node("x", "r", "link", "x")

    def test_clone_is_distinct(self):
        node = Node("n1", "r", FILE, "a.txt", size=3)
        copy = node.clone(id="n2")

        assert copy is not node
        assert (copy.id, copy.parent, copy.size) == ("n2", "r", 3)
        assert node.id == "n1"


class TestNodeStore:
    def test_lookup(self, store):
        assert store.find_root().id == "r"
        assert [n.id for n in store.children("d1")] == ["f1", "d2"]
        assert "f4" in store and "zz" not in store
        assert store.get("zz") is None

    def test_replace_keeps_list_identity(self, store):
        nodes = store.nodes
        store.replace([Node("r2", ROOT, DIR, "root")])

        assert store.nodes is nodes
        assert len(store) == 1


def test_view_context_location_id(store):
    assert ViewContext().location_id == ROOT
    assert ViewContext(location=store.get("d1")).location_id == "d1"


class TestErrorHandling:
    def test_handle_error_envelope(self):
        logger = logging.getLogger("test")
        try:
            raise NodeNotFoundError("Node not found: x", {"id": "x"})
        except NodeNotFoundError as e:
            response = handle_error(logger, e, "rename")

        assert response["type"] == "error"
        assert response["message"] == "Node not found: x"
        assert response["details"]["type"] == "NodeNotFoundError"
        assert response["details"]["id"] == "x"

    def test_log_operation_hides_apikey(self, caplog):
        logger = logging.getLogger("test")
        with caplog.at_level(logging.INFO, logger="test"):
            log_operation(logger, "move", apikey="secret", nodes=["a"])

        record = caplog.records[-1]
        assert record.parameters == {"nodes": ["a"]}
        assert "secret" not in caplog.text
