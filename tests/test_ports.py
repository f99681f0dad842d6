"""
Tests for exposed port detection.
"""

from opensourcer.ports import detect_port, KNOWN_PORTS


class TestDetectPort:
    def test_double_quoted_mapping(self):
        assert detect_port('ports:\n  - "8080:80"\n') == 8080

    def test_single_quoted_mapping(self):
        assert detect_port("ports:\n  - '3001:3001'\n") == 3001

    def test_no_known_port(self):
        assert detect_port('ports:\n  - "9999:80"\n') == 0
        assert detect_port("") == 0

    def test_unquoted_mapping_is_not_detected(self):
        assert detect_port("ports:\n  - 8080:80\n") == 0

    def test_table_order_decides(self):
        text = 'ports:\n  - "80:80"\n  - "8080:8080"\n'
        assert detect_port(text) == 8080

    def test_container_side_port_does_not_match(self):
        # 80 only appears as the container port here
        assert detect_port('ports:\n  - "9000:80"\n') == 0

    def test_table_is_ordered_with_generic_port_last(self):
        ports = [port for port, _ in KNOWN_PORTS]
        assert ports == [2368, 3000, 3001, 5678, 8000, 8065, 8080, 8096, 80]
