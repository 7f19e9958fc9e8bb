"""Tests for chat tool execution: output formatting, edge cases."""

from unittest.mock import patch, MagicMock

from src.data.models import School
from src.chat.tools import execute_tool, TOOL_SCHEMAS, GEMINI_TOOLS, _convert_to_gemini_declaration


class TestToolSchemas:
    def test_all_schemas_have_required_fields(self):
        for schema in TOOL_SCHEMAS:
            assert "name" in schema
            assert "description" in schema
            assert "input_schema" in schema
            assert "properties" in schema["input_schema"]
            assert "required" in schema["input_schema"]

    def test_tool_names(self):
        names = {s["name"] for s in TOOL_SCHEMAS}
        assert names == {"search_schools", "get_school_details", "rank_schools", "get_borough_summary"}

    def test_borough_enum(self):
        schema = next(s for s in TOOL_SCHEMAS if s["name"] == "rank_schools")
        assert "Staten Island" in schema["input_schema"]["properties"]["borough"]["enum"]


class TestGeminiToolConversion:
    def test_converts_all_tools(self):
        assert len(GEMINI_TOOLS.function_declarations) == len(TOOL_SCHEMAS)

    def test_converted_tool_keeps_schema(self):
        converted = _convert_to_gemini_declaration(TOOL_SCHEMAS[0])
        assert converted["name"] == "search_schools"
        assert converted["parameters_json_schema"]["required"] == ["query"]


def _mock_client(schools):
    client = MagicMock()
    client.get_all_schools.return_value = schools
    client.search_schools.return_value = schools
    client.get_school_by_dbn.side_effect = lambda dbn: next((s for s in schools if s.dbn == dbn), None)
    return client


class TestExecuteTool:
    @patch("src.chat.tools.get_client")
    def test_search_schools_no_results(self, mock_get_client):
        mock_get_client.return_value = _mock_client([])
        result = execute_tool("search_schools", {"query": "zzz_nonexistent"})
        assert "No schools found" in result

    @patch("src.chat.tools.get_client")
    def test_search_schools_with_results(self, mock_get_client, sample_schools):
        mock_get_client.return_value = _mock_client(sample_schools[:1])
        result = execute_tool("search_schools", {"query": "158"})
        assert "P.S. 158 Bayard Taylor" in result
        assert "02M158" in result
        assert "Manhattan" in result
        assert "Overall Score: 81" in result

    @patch("src.chat.tools.get_client")
    def test_search_non_nyc_school(self, mock_get_client, sample_schools):
        mock_get_client.return_value = _mock_client(sample_schools[-1:])
        result = execute_tool("search_schools", {"query": "charter"})
        assert "Outside NYC" in result

    @patch("src.chat.tools.get_client")
    def test_school_details(self, mock_get_client, sample_schools):
        mock_get_client.return_value = _mock_client(sample_schools)
        result = execute_tool("get_school_details", {"dbn": "02M158"})
        assert "Overall Score: 81 (Outstanding)" in result
        assert "Academics: 90" in result
        assert "ELA Proficient: 85%" in result
        assert "Enrollment: 750 students" in result

    @patch("src.chat.tools.get_client")
    def test_school_details_notes_missing_families(self, mock_get_client, sample_schools):
        mock_get_client.return_value = _mock_client(sample_schools)
        result = execute_tool("get_school_details", {"dbn": "25Q032"})
        assert "Progress: N/A" in result
        assert "No data for: climate, progress" in result

    @patch("src.chat.tools.get_client")
    def test_school_details_not_found(self, mock_get_client):
        mock_get_client.return_value = _mock_client([])
        result = execute_tool("get_school_details", {"dbn": "99Z999"})
        assert result == "No school found with DBN 99Z999."

    @patch("src.chat.tools.get_client")
    def test_rank_schools_by_borough(self, mock_get_client, sample_schools):
        mock_get_client.return_value = _mock_client(sample_schools)
        result = execute_tool("rank_schools", {"borough": "Brooklyn"})
        assert "P.S. 282 Park Slope" in result
        assert "Bayard Taylor" not in result

    @patch("src.chat.tools.get_client")
    def test_rank_schools_limit(self, mock_get_client, sample_schools):
        mock_get_client.return_value = _mock_client(sample_schools)
        result = execute_tool("rank_schools", {"limit": 2})
        assert "Top 2 of 6 schools by overall" in result
        assert result.index("Charter Academy") < result.index("Bayard Taylor")

    @patch("src.chat.tools.get_client")
    def test_rank_schools_no_match(self, mock_get_client, sample_schools):
        mock_get_client.return_value = _mock_client(sample_schools)
        assert execute_tool("rank_schools", {"district": 9}) == "No schools match those filters."

    @patch("src.chat.tools.get_client")
    def test_rank_schools_bad_sort(self, mock_get_client, sample_schools):
        mock_get_client.return_value = _mock_client(sample_schools)
        assert "Unknown sort option" in execute_tool("rank_schools", {"sort_by": "rating"})

    @patch("src.chat.tools.get_client")
    def test_borough_summary(self, mock_get_client, sample_schools):
        mock_get_client.return_value = _mock_client(sample_schools)
        result = execute_tool("get_borough_summary", {})
        assert "Staten Island (districts 31): 1 schools" in result
        assert "Brooklyn (districts 13, 14" in result
        assert "32): 1 schools" in result

    @patch("src.chat.tools.get_client")
    def test_borough_summary_empty(self, mock_get_client):
        mock_get_client.return_value = _mock_client([])
        assert execute_tool("get_borough_summary", {}) == "No school data available."

    @patch("src.chat.tools.get_client")
    def test_unknown_tool(self, mock_get_client):
        mock_get_client.return_value = _mock_client([])
        assert "Unknown tool" in execute_tool("nonexistent", {})
