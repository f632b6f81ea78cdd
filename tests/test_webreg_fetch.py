import pytest

import webreg_ics.webreg_fetch as webreg_fetch

PAGE = '<html><body><table id="list-id-table"></table></body></html>'


class FakeDriver:
    def __init__(self):
        self.visited = []
        self.quit_called = False
        self.page_source = PAGE

    def get(self, url):
        self.visited.append(url)

    def quit(self):
        self.quit_called = True


@pytest.fixture
def driver(monkeypatch):
    fake = FakeDriver()
    monkeypatch.setattr(webreg_fetch, "_create_driver", lambda: fake)
    return fake


def _wait_results(monkeypatch, *results):
    calls = []
    results = list(results)

    def fake_wait(driver, timeout=30):
        calls.append(timeout)
        return results.pop(0)

    monkeypatch.setattr(webreg_fetch, "_wait_for_list_table", fake_wait)
    return calls


def _answer_prompts(monkeypatch):
    prompts = []
    monkeypatch.setattr("builtins.input", lambda prompt="": prompts.append(prompt) or "")
    return prompts


def test_returns_page_source(driver, monkeypatch):
    calls = _wait_results(monkeypatch, True)
    prompts = _answer_prompts(monkeypatch)

    assert webreg_fetch.fetch_webreg_html() == PAGE
    assert driver.visited == [webreg_fetch.WEBREG_URL]
    assert len(prompts) == 1
    assert calls == [30]
    assert driver.quit_called


def test_retries_once(driver, monkeypatch, capsys):
    calls = _wait_results(monkeypatch, False, True)
    prompts = _answer_prompts(monkeypatch)

    html = webreg_fetch.fetch_webreg_html(url="https://example.test/webreg", timeout=5)
    assert html == PAGE
    assert driver.visited == ["https://example.test/webreg"]
    assert calls == [5, 5]
    assert len(prompts) == 2
    assert "Class list not found" in capsys.readouterr().out
    assert driver.quit_called


def test_gives_up_after_retry(driver, monkeypatch):
    _wait_results(monkeypatch, False, False)
    _answer_prompts(monkeypatch)

    with pytest.raises(RuntimeError, match="list-id-table"):
        webreg_fetch.fetch_webreg_html()
    assert driver.quit_called


def test_driver_failure_message(monkeypatch):
    class BrokenManager:
        def install(self):
            raise OSError("no network")

    monkeypatch.setattr(webreg_fetch, "ChromeDriverManager", BrokenManager)
    with pytest.raises(RuntimeError, match="open WebReg") as exc:
        webreg_fetch._create_driver()
    assert "--webreg-html" in str(exc.value)
    assert "no network" in str(exc.value)
