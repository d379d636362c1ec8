"""JavaScript for the dashboard page.

The server owns fetching and state; the page only swaps in the latest
rendered fragment and handles the fullscreen button.
"""

JS_CORE = """
        const POLL_INTERVAL = $poll_interval_ms;
        let refreshTimer = null;

        async function refreshContent() {
            try {
                const response = await fetch('/fragment', { cache: 'no-store' });
                if (!response.ok) {
                    throw new Error('HTTP ' + response.status);
                }
                document.getElementById('content').innerHTML = await response.text();
            } catch (err) {
                // Keep the last rendered state; the next tick tries again
                console.error('Error refreshing dashboard:', err);
            }
        }

        function toggleFullscreen() {
            if (!document.fullscreenElement) {
                document.documentElement.requestFullscreen();
            } else if (document.exitFullscreen) {
                document.exitFullscreen();
            }
        }

        // Delegated: the button is replaced on every refresh
        document.addEventListener('click', function(event) {
            if (event.target.closest('[data-action="toggle-fullscreen"]')) {
                toggleFullscreen();
            }
        });

        refreshTimer = setInterval(refreshContent, POLL_INTERVAL);

        window.addEventListener('pagehide', function() {
            clearInterval(refreshTimer);
        });
"""
