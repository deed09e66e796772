import pytest
from pathlib import Path
from playwright.sync_api import Playwright


@pytest.fixture(scope="session", autouse=True)
def capture_application_response(playwright: Playwright, base_url):
    """Save the application's root response at the start of the test session."""
    output_dir = Path("test-results")
    output_dir.mkdir(exist_ok=True)

    request = playwright.request.new_context()
    try:
        response = request.get(base_url, fail_on_status_code=False)

        response_path = output_dir / "application-root.txt"
        response_path.write_text(f"{response.status} {response.status_text}\n\n{response.text()}")
        print(f"\nApplication response saved to: {response_path}")
    finally:
        request.dispose()
