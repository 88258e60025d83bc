"""Browser automation modules (Playwright).

``profile`` builds launch/context arguments and stealth patches,
``navigation`` opens the tracking page, and ``interceptor`` captures the
tracking site's own API response as the page loads it.
"""
