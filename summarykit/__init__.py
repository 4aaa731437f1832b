"""Study-summary rendering: normalization, HTML preview and PDF export."""
