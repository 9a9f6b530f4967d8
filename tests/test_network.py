"""
Tests for the HTTP transport and HTML document fetcher (curl_cffi mocked).
"""
from unittest.mock import MagicMock, patch

import pytest

from episode_guide.errors import FetchError
from episode_guide.scraper.document import HtmlDocumentFetcher, LxmlQuery, parse_html
from episode_guide.utils.config import AppConfig
from episode_guide.utils.network import DEFAULT_USER_AGENT, NetworkHandler, build_proxies


def _response(status_code=200, text="<html><body><p>ok</p></body></html>"):
    r = MagicMock()
    r.status_code = status_code
    r.text = text
    return r


class TestBuildProxies:

    def test_empty(self):
        assert build_proxies("") is None
        assert build_proxies(None) is None

    def test_proxy(self):
        assert build_proxies(" http://127.0.0.1:7890 ") == {
            "http": "http://127.0.0.1:7890",
            "https": "http://127.0.0.1:7890",
        }


class TestNetworkHandler:

    @patch("episode_guide.utils.network.requests.get")
    def test_get_ok(self, mock_get):
        mock_get.return_value = _response(text="hello")
        cfg = AppConfig(proxy_url="http://proxy:1", request_timeout_sec=5, impersonate="safari")

        assert NetworkHandler(cfg).get("http://www.tv.com/x") == "hello"

        kwargs = mock_get.call_args.kwargs
        assert kwargs["url"] == "http://www.tv.com/x"
        assert kwargs["timeout"] == 5.0
        assert kwargs["impersonate"] == "safari"
        assert kwargs["proxies"] == {"http": "http://proxy:1", "https": "http://proxy:1"}
        assert kwargs["headers"]["User-Agent"] == DEFAULT_USER_AGENT

    @patch("episode_guide.utils.network.requests.get")
    def test_extra_headers_merged(self, mock_get):
        mock_get.return_value = _response()
        NetworkHandler().get("http://www.tv.com/x", headers={"Referer": "http://www.tv.com/"})
        headers = mock_get.call_args.kwargs["headers"]
        assert headers["Referer"] == "http://www.tv.com/"
        assert "User-Agent" in headers

    @patch("episode_guide.utils.network.requests.get")
    def test_non_200_raises(self, mock_get):
        mock_get.return_value = _response(status_code=404)
        with pytest.raises(FetchError) as exc_info:
            NetworkHandler().get("http://www.tv.com/missing")
        assert exc_info.value.status_code == 404
        assert exc_info.value.url == "http://www.tv.com/missing"

    @patch("episode_guide.utils.network.requests.get")
    def test_transport_error_raises_without_retry(self, mock_get):
        mock_get.side_effect = ConnectionError("reset by peer")
        with pytest.raises(FetchError) as exc_info:
            NetworkHandler().get("http://www.tv.com/x")
        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert mock_get.call_count == 1

    @patch("episode_guide.utils.network.time.sleep")
    @patch("episode_guide.utils.network.requests.get")
    def test_request_delay(self, mock_get, mock_sleep):
        mock_get.return_value = _response()
        NetworkHandler(AppConfig(request_delay_sec=1.5)).get("http://www.tv.com/x")
        mock_sleep.assert_called_once_with(1.5)


class TestDocuments:

    def test_fetch_document(self):
        network = MagicMock()
        network.get.return_value = '<html><body><h2><a href="/a">A</a></h2></body></html>'
        dom = HtmlDocumentFetcher(network).fetch_document("http://www.tv.com/")
        q = LxmlQuery()
        (node,) = q.select_nodes("//h2/a", dom)
        assert q.get_text_content(node) == "A"
        assert q.get_attribute("href", node) == "/a"
        assert q.get_attribute("title", node) == ""

    def test_fetch_error_propagates(self):
        network = MagicMock()
        network.get.side_effect = FetchError("HTTP 500", url="http://www.tv.com/", status_code=500)
        with pytest.raises(FetchError):
            HtmlDocumentFetcher(network).fetch_document("http://www.tv.com/")

    @pytest.mark.parametrize("html", ["", "   \n"])
    def test_empty_body(self, html):
        with pytest.raises(FetchError):
            parse_html(html, url="http://www.tv.com/")

    def test_select_string(self):
        dom = parse_html("<html><body><div class='meta'>\n  Season 1  </div><div class='meta'>x</div></body></html>")
        q = LxmlQuery()
        assert q.select_string("//*[@class='meta']", dom) == "Season 1"
        assert q.select_string("//*[@class='missing']", dom) == ""

    def test_select_nodes_ignores_non_elements(self):
        dom = parse_html("<html><body><p>a</p><p>b</p></body></html>")
        assert LxmlQuery().select_nodes("//p/text()", dom) == []
        assert len(LxmlQuery().select_nodes("//p", dom)) == 2

    def test_xml_declaration_in_text(self):
        html = '<?xml version="1.0" encoding="UTF-8"?>\n<html><body><p class="meta">Season 1</p></body></html>'
        dom = parse_html(html, url="http://www.tv.com/")
        assert LxmlQuery().select_string("//p[@class='meta']", dom) == "Season 1"

    def test_bytes_with_declared_encoding(self):
        html = '<?xml version="1.0" encoding="iso-8859-1"?><html><body><p>Café</p></body></html>'.encode("iso-8859-1")
        dom = parse_html(html)
        assert LxmlQuery().select_string("//p", dom) == "Café"
