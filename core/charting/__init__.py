"""Chart.js payload rendering and CSV export for uploaded data.

Views build a `ChartConfig`, render it here against the current upload, and
hand the resulting JSON payload to the browser.
"""
