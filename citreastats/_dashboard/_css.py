"""CSS styles for the dashboard.

Embedded in the page head so the server has no static file routes.
"""

CSS_STYLES = """
        :root {
            --bg: #ffffff;
            --text: #1f2937;
            --text-strong: #111827;
            --text-dim: #4b5563;
            --border: #e5e7eb;
            --accent: #3b82f6;
            --accent-hover: #2563eb;
            --error: #ef4444;
        }

        * { margin: 0; padding: 0; box-sizing: border-box; }

        body {
            font-family: system-ui, -apple-system, 'Segoe UI', Roboto, sans-serif;
            background: var(--bg);
            color: var(--text);
        }

        #content {
            max-width: 72rem;
            margin: 0 auto;
            padding: 1.5rem;
            min-height: 100vh;
        }

        .status-message {
            text-align: center;
            margin-top: 1rem;
        }

        .status-message.error { color: var(--error); }

        .status-message a {
            color: var(--accent);
            text-decoration: underline;
        }

        .page-title {
            font-size: 2.25rem;
            font-weight: 800;
            text-align: center;
            margin-bottom: 2rem;
        }

        .toolbar {
            text-align: center;
            margin-bottom: 1.5rem;
        }

        .fullscreen-button {
            padding: 0.5rem 1rem;
            background: var(--accent);
            color: #ffffff;
            font-weight: 600;
            border: none;
            border-radius: 0.25rem;
            cursor: pointer;
            transition: background 200ms;
        }

        .fullscreen-button:hover { background: var(--accent-hover); }

        .grid {
            display: grid;
            grid-template-columns: 1fr;
            gap: 2rem;
        }

        @media (min-width: 640px) {
            .grid { grid-template-columns: repeat(2, 1fr); }
        }

        @media (min-width: 1024px) {
            .grid { grid-template-columns: repeat(4, 1fr); }
        }

        .card {
            padding: 1.5rem;
            border: 1px solid var(--border);
            border-radius: 0.5rem;
            box-shadow: 0 10px 15px -3px rgba(0, 0, 0, 0.1);
            transition: box-shadow 300ms;
        }

        .card:hover { box-shadow: 0 20px 25px -5px rgba(0, 0, 0, 0.1); }

        .card-title {
            font-size: 1.5rem;
            font-weight: 700;
            margin-bottom: 1rem;
        }

        .card-value {
            font-size: 1.875rem;
            font-weight: 600;
            color: var(--text-strong);
            margin-bottom: 0.5rem;
        }

        .card-units {
            font-size: 1.25rem;
            color: var(--text-dim);
        }

        .card-description {
            color: var(--text-dim);
            margin-top: 0.5rem;
        }
"""
