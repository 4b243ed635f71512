"""Jinja templates for rendering the report."""

REPORT_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{{ title }}</title>
<style>
  body { font-family: sans-serif; max-width: 1100px; margin: 2em auto; color: #222; }
  h1 { margin-bottom: 0.2em; }
  .generated { color: #777; font-size: 0.9em; }
  table { border-collapse: collapse; margin: 1em 0 2em 0; font-size: 0.9em; }
  th, td { padding: 0.3em 0.8em; border-bottom: 1px solid #ddd; }
  td.number { text-align: right; font-variant-numeric: tabular-nums; }
  figure { margin: 2em 0; }
  figure img { max-width: 100%; }
  figcaption { color: #555; font-size: 0.9em; }
</style>
</head>
<body>
<h1>{{ title }}</h1>
<p class="generated">Generated {{ generated_at }}</p>
{% if description %}<p>{{ description }}</p>{% endif %}

<h2>Settings</h2>
<table>
{% for key, value in settings.items() %}
  <tr><th scope="row">{{ key }}</th><td>{{ value }}</td></tr>
{% endfor %}
</table>

{% for section in sections %}
<h2>{{ section.title }}</h2>
{% for table in section.tables %}
<h3>{{ table.title }}</h3>
<table>
  <tr>{% for col in table.columns %}<th>{{ col }}</th>{% endfor %}</tr>
{% for row in table.rows %}
  <tr>{% for cell in row %}<td{% if cell.number %} class="number"{% endif %}>{{ cell.text }}</td>{% endfor %}</tr>
{% endfor %}
</table>
{% endfor %}
{% for figure in section.figures %}
<figure id="{{ figure.name }}">
  <h3>{{ figure.title }}</h3>
  <img src="{{ figure.src }}" alt="{{ figure.title }}">
  <figcaption>{{ figure.caption }}</figcaption>
</figure>
{% endfor %}
{% endfor %}
</body>
</html>
"""
"""A template for the complete report as a single self-contained HTML page."""
