"""
Report generation utilities for different output formats.
"""

import os
import json

from .config import BOLD, RESET, GREY, GREEN, YELLOW, RED, BLUE
from .utils import remove_ansi_colors

TOP_RECOMMENDATIONS = 5

# =============================================================================
# STRUCTURED OUTPUT
# =============================================================================

def _round(value):
    return round(float(value), 2)


def pillar_to_dict(pillar):
    return {
        "key": pillar.key,
        "name": pillar.name,
        "weight": pillar.weight,
        "score": _round(pillar.score),
        "metrics": {name: _round(value) for name, value in pillar.metrics.items()},
        "recommendations": list(pillar.recommendations),
        "critical_issues": list(pillar.critical_issues),
    }


def score_to_dict(score):
    """Convert a CSGAScore into plain JSON-serializable data."""
    return {
        "project_name": score.project_name,
        "project_path": score.project_path,
        "timestamp": score.timestamp.isoformat(),
        "overall_score": _round(score.overall_score),
        "maturity_level": score.maturity_level,
        "compliance_status": score.compliance_status,
        "pillars": {pillar.key: pillar_to_dict(pillar) for pillar in score.pillars},
        "metadata": dict(score.metadata),
    }


def generate_json_report(score, indent=2):
    return json.dumps(score_to_dict(score), indent=indent, ensure_ascii=False)


def top_recommendations(score, limit=TOP_RECOMMENDATIONS):
    """Unique recommendations across pillars, in pillar order."""
    seen = []
    for recommendation in score.recommendations:
        if recommendation not in seen:
            seen.append(recommendation)
    return seen[:limit]

# =============================================================================
# TEXT AND MARKDOWN OUTPUT
# =============================================================================

def status_symbol(value):
    if value >= 80:
        return "✅"
    if value >= 60:
        return "⚠️"
    return "❌"


def _score_color(value):
    if value >= 80:
        return GREEN
    if value >= 60:
        return YELLOW
    return RED


def format_text_report(score):
    """Human readable, ANSI-colored summary for the terminal."""
    lines = [f"\n{BOLD}📊 CSGA Evaluation: {score.project_name}{RESET}"]
    lines.append(f"{GREY}================================{RESET}")
    lines.append(f"Path: {score.project_path}")
    lines.append(f"Generated: {score.timestamp.strftime('%Y-%m-%d %H:%M:%S')}")
    color = _score_color(score.overall_score)
    lines.append(f"\n{BOLD}Overall Score:{RESET} {color}{score.overall_score:.2f}/100{RESET}")
    lines.append(f"{BOLD}Maturity Level:{RESET} {score.maturity_level}")
    lines.append(f"{BOLD}Compliance:{RESET} {score.compliance_status}")

    for pillar in score.pillars:
        color = _score_color(pillar.score)
        lines.append(
            f"\n{status_symbol(pillar.score)} {BOLD}{pillar.name}{RESET} "
            f"{GREY}(weight {pillar.weight:.0%}){RESET}: {color}{pillar.score:.2f}{RESET}"
        )
        for name, value in pillar.metrics.items():
            lines.append(f"  {GREY}•{RESET} {name.replace('_', ' ')}: {value:.1f}")
        for issue in pillar.critical_issues:
            lines.append(f"  {RED}✖ {issue}{RESET}")

    recommendations = top_recommendations(score)
    if recommendations:
        lines.append(f"\n{BOLD}{BLUE}💡 Top Recommendations{RESET}")
        for index, recommendation in enumerate(recommendations, 1):
            lines.append(f"  {index}. {recommendation}")
    return "\n".join(lines)


def generate_markdown_report(score):
    """Markdown report with a pillar table, sub-metrics and recommendations."""
    lines = [f"# CSGA Report: {score.project_name}", ""]
    lines.append(f"- **Overall Score:** {score.overall_score:.2f}/100")
    lines.append(f"- **Maturity Level:** {score.maturity_level}")
    lines.append(f"- **Compliance:** {score.compliance_status}")
    lines.append(f"- **Generated:** {score.timestamp.isoformat()}")
    lines.append("")
    lines.append("| Pillar | Weight | Score | Status |")
    lines.append("|---|---|---|---|")
    for pillar in score.pillars:
        lines.append(
            f"| {pillar.name} | {pillar.weight:.0%} | {pillar.score:.2f} | {status_symbol(pillar.score)} |"
        )

    for pillar in score.pillars:
        lines.append("")
        lines.append(f"## {pillar.name}")
        lines.append("")
        for name, value in pillar.metrics.items():
            lines.append(f"- {name.replace('_', ' ')}: {value:.1f}")
        if pillar.critical_issues:
            lines.append("")
            lines.append("**Critical issues:**")
            for issue in pillar.critical_issues:
                lines.append(f"- {issue}")

    recommendations = top_recommendations(score)
    if recommendations:
        lines.append("")
        lines.append("## Top Recommendations")
        lines.append("")
        for index, recommendation in enumerate(recommendations, 1):
            lines.append(f"{index}. {recommendation}")
    return "\n".join(lines) + "\n"

# =============================================================================
# HTML OUTPUT
# =============================================================================

HTML_TEMPLATE = '''
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>CSGA Report - {{ score.project_name }}</title>
    <style>
        body { font-family: Arial, sans-serif; background: #f8f8f8; color: #222; }
        .container { max-width: 900px; margin: 2em auto; background: #fff; padding: 2em; border-radius: 8px; box-shadow: 0 2px 8px #0001; }
        h1 { color: #2d5be3; }
        table { border-collapse: collapse; width: 100%; }
        td, th { border-bottom: 1px solid #ddd; padding: 0.4em; text-align: left; }
        .critical { color: #c62828; }
        .section { margin-bottom: 2em; }
        .timestamp { color: #888; font-size: 0.9em; }
        pre { background: #f4f4f4; padding: 1em; border-radius: 6px; overflow-x: auto; }
    </style>
</head>
<body>
    <div class="container">
        <h1>CSGA Report: {{ score.project_name }}</h1>
        <div class="timestamp">Generated: {{ score.timestamp.isoformat() }}</div>
        <div class="section">
            <h2>{{ "%.2f"|format(score.overall_score) }}/100 &middot; {{ score.maturity_level }} &middot; {{ score.compliance_status }}</h2>
            <table>
                <tr><th>Pillar</th><th>Weight</th><th>Score</th></tr>
                {% for pillar in score.pillars %}
                <tr><td>{{ pillar.name }}</td><td>{{ "%.0f"|format(pillar.weight * 100) }}%</td><td>{{ "%.2f"|format(pillar.score) }}</td></tr>
                {% endfor %}
            </table>
        </div>
        {% for pillar in score.pillars %}
        <div class="section">
            <h2>{{ pillar.name }}</h2>
            <ul>
            {% for name, value in pillar.metrics.items() %}
                <li>{{ name }}: {{ "%.1f"|format(value) }}</li>
            {% endfor %}
            </ul>
            {% for issue in pillar.critical_issues %}
            <p class="critical">{{ issue }}</p>
            {% endfor %}
        </div>
        {% endfor %}
        {% if recommendations %}
        <div class="section">
            <h2>Top Recommendations</h2>
            <ol>
            {% for recommendation in recommendations %}
                <li>{{ recommendation }}</li>
            {% endfor %}
            </ol>
        </div>
        {% endif %}
        {% if config %}
        <div class="section">
            <h2>Configuration</h2>
            <pre>{{ config }}</pre>
        </div>
        {% endif %}
    </div>
</body>
</html>
'''


def generate_html_report(score, out_path, config=None):
    """Render the HTML report to out_path. Returns the path, or None without Jinja2."""
    try:
        from jinja2 import Template
    except ImportError:
        print(f"{RED}Jinja2 is required for HTML report generation. Install with 'pip install jinja2'.{RESET}")
        return None

    template = Template(HTML_TEMPLATE, autoescape=True)
    html = template.render(
        score=score,
        recommendations=top_recommendations(score),
        config=json.dumps(config, indent=2, sort_keys=True) if config else None,
    )
    directory = os.path.dirname(os.path.abspath(out_path))
    os.makedirs(directory, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(html)
    return out_path


def write_report(text, out_path):
    """Write a text/markdown/JSON report, stripping ANSI codes."""
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(remove_ansi_colors(text))
    return out_path
