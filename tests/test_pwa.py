def test_manifest(client):
    for path in ("/manifest.json", "/manifest.webmanifest"):
        response = client.get(path)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/manifest+json")
        manifest = response.json()
        assert manifest["name"] == "Front Desk Visitor Management"
        assert manifest["display"] == "standalone"
        assert {icon["sizes"] for icon in manifest["icons"]} == {"192x192", "512x512"}


def test_service_worker(client):
    response = client.get("/sw.js")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/javascript")
    assert response.headers["cache-control"] == "no-cache"
    assert "const CACHE_NAME = 'frontdesk-v1';" in response.text
    assert "'/api/'" in response.text


def test_service_worker_disables_caching_on_localhost(client):
    response = client.get("/sw.js", headers={"host": "localhost:8000"})
    assert "const CACHE_NAME = 'frontdesk-dev-disabled';" in response.text


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
