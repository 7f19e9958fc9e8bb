"""Tool definitions for Gemini function calling."""

from typing import Any
from google.genai import types

from src.data.client import get_client
from src.data.geography import count_by_borough, get_districts_for_borough
from src.data.models import SURVEY_FIELDS, Borough, ScoreTier
from src.data.ranking import SORT_OPTIONS, SchoolFilter, rank_schools, score_school, tier_counts
from .prompts import TOOL_DESCRIPTIONS

BOROUGH_NAMES = [b.value for b in Borough]

# Tool schemas (generic format)
TOOL_SCHEMAS = [
    {
        "name": "search_schools",
        "description": TOOL_DESCRIPTIONS["search_schools"],
        "input_schema": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "School name or DBN (partial match supported)",
                }
            },
            "required": ["query"],
        },
    },
    {
        "name": "get_school_details",
        "description": TOOL_DESCRIPTIONS["get_school_details"],
        "input_schema": {
            "type": "object",
            "properties": {
                "dbn": {
                    "type": "string",
                    "description": "The school's DBN, e.g. 02M158",
                }
            },
            "required": ["dbn"],
        },
    },
    {
        "name": "rank_schools",
        "description": TOOL_DESCRIPTIONS["rank_schools"],
        "input_schema": {
            "type": "object",
            "properties": {
                "district": {
                    "type": "integer",
                    "description": "Community school district number (1-32)",
                },
                "borough": {
                    "type": "string",
                    "enum": BOROUGH_NAMES,
                    "description": "Borough to rank within",
                },
                "grade_band": {
                    "type": "string",
                    "description": "Grade band, e.g. 'K-5' or 'K-8'",
                },
                "sort_by": {
                    "type": "string",
                    "enum": list(SORT_OPTIONS),
                    "description": "What to rank by. Defaults to 'overall'.",
                    "default": "overall",
                },
                "limit": {
                    "type": "integer",
                    "description": "Number of schools to return (default 10)",
                    "default": 10,
                },
            },
            "required": [],
        },
    },
    {
        "name": "get_borough_summary",
        "description": TOOL_DESCRIPTIONS["get_borough_summary"],
        "input_schema": {
            "type": "object",
            "properties": {},
            "required": [],
        },
    },
]


def _fmt(value, suffix: str = "") -> str:
    return f"{value:.0f}{suffix}" if value is not None else "N/A"


def execute_tool(tool_name: str, tool_input: dict[str, Any]) -> str:
    """Execute a tool and return the result as a string."""
    client = get_client()

    if tool_name == "search_schools":
        results = client.search_schools(tool_input["query"], limit=10)
        if not results:
            return "No schools found matching that query."

        output = f"Found {len(results)} schools:\n\n"
        for s in results:
            r = score_school(s)
            borough = r.borough.value if r.borough else "Outside NYC"
            output += f"- **{s.name}** (DBN: {s.dbn})\n"
            output += f"  District {s.district}, {borough}, Overall Score: {_fmt(r.overall_score)}\n\n"
        return output

    elif tool_name == "get_school_details":
        dbn = tool_input["dbn"]
        school = client.get_school_by_dbn(dbn)
        if school is None:
            return f"No school found with DBN {dbn}."

        r = score_school(school)
        output = f"**{school.name}** (DBN: {school.dbn})\n\n"
        if r.borough:
            output += f"- Location: District {school.district}, {r.borough.value}\n"
        if school.grade_band:
            output += f"- Grades: {school.grade_band}\n"
        output += f"- Overall Score: {_fmt(r.overall_score)} ({r.tier.label})\n"
        output += f"- Academics: {_fmt(r.family_scores['academics'])}\n"
        output += f"- Climate: {_fmt(r.family_scores['climate'])}\n"
        output += f"- Progress: {_fmt(r.family_scores['progress'])}\n"
        if school.ela_proficiency is not None or school.math_proficiency is not None:
            output += f"- ELA Proficient: {_fmt(school.ela_proficiency, '%')}\n"
            output += f"- Math Proficient: {_fmt(school.math_proficiency, '%')}\n"
        if school.enrollment:
            output += f"- Enrollment: {school.enrollment:,} students\n"
        if school.student_teacher_ratio:
            output += f"- Student-Teacher Ratio: {school.student_teacher_ratio:.1f}:1\n"

        survey = [(f, getattr(school, f)) for f in SURVEY_FIELDS if getattr(school, f) is not None]
        if survey:
            output += "\n**NYC School Survey (% positive):**\n"
            for field_name, value in survey:
                output += f"- {field_name.replace('_', ' ').title()}: {value:.0f}%\n"

        missing = [k for k, v in r.family_scores.items() if v is None]
        if missing:
            output += f"\n*No data for: {', '.join(missing)}. The Overall Score is reweighted without them.*"
        return output

    elif tool_name == "rank_schools":
        borough_name = tool_input.get("borough")
        borough = Borough(borough_name) if borough_name in BOROUGH_NAMES else None
        sort_by = tool_input.get("sort_by", "overall")
        if sort_by not in SORT_OPTIONS:
            return f"Unknown sort option: {sort_by}. Use one of {', '.join(SORT_OPTIONS)}."
        limit = int(tool_input.get("limit", 10))

        criteria = SchoolFilter(
            district=tool_input.get("district"),
            borough=borough,
            grade_band=tool_input.get("grade_band"),
        )
        ranked = rank_schools(client.get_all_schools(), criteria, sort_by)
        if not ranked:
            return "No schools match those filters."

        output = f"**Top {min(limit, len(ranked))} of {len(ranked)} schools by {sort_by}:**\n\n"
        for i, r in enumerate(ranked[:limit], start=1):
            output += f"{i}. **{r.school.name}** ({r.school.dbn}) - Overall {_fmt(r.overall_score)}, {r.tier.label}\n"
        return output

    elif tool_name == "get_borough_summary":
        schools = client.get_all_schools()
        if not schools:
            return "No school data available."

        counts = count_by_borough(s.dbn for s in schools)
        ranked = rank_schools(schools)
        output = "**Schools by Borough:**\n\n"
        for borough in Borough:
            in_borough = [r for r in ranked if r.borough == borough]
            tiers = tier_counts(in_borough)
            districts = get_districts_for_borough(borough)
            output += (
                f"- {borough.value} (districts {', '.join(map(str, districts))}): "
                f"{counts[borough.value]} schools, "
                f"{tiers[ScoreTier.OUTSTANDING]} outstanding, "
                f"{tiers[ScoreTier.STRONG]} strong, "
                f"{tiers[ScoreTier.BELOW_AVERAGE]} below average\n"
            )
        return output

    else:
        return f"Unknown tool: {tool_name}"


def _convert_to_gemini_declaration(schema: dict) -> dict:
    """Convert a tool schema to a dict suitable for types.FunctionDeclaration."""
    return {
        "name": schema["name"],
        "description": schema["description"],
        "parameters_json_schema": schema["input_schema"],
    }


# Build google.genai Tool object with all function declarations
GEMINI_TOOLS = types.Tool(
    function_declarations=[_convert_to_gemini_declaration(s) for s in TOOL_SCHEMAS]
)
