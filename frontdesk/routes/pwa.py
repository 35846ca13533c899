"""Installable check-in kiosk: web manifest and service worker"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

router = APIRouter(tags=["PWA"])

MANIFEST = {
    "name": "Front Desk Visitor Management",
    "short_name": "Front Desk",
    "description": "Visitor check-in and IT helpdesk for your front desk",
    "start_url": "/",
    "display": "standalone",
    "background_color": "#ffffff",
    "theme_color": "#3b82f6",
    "orientation": "portrait",
    "icons": [
        {"src": "/icons/icon-192x192.png", "sizes": "192x192", "type": "image/png", "purpose": "any maskable"},
        {"src": "/icons/icon-512x512.png", "sizes": "512x512", "type": "image/png", "purpose": "any maskable"},
    ],
}

CACHE_NAME = "frontdesk-v1"
DEV_CACHE_NAME = "frontdesk-dev-disabled"
PRECACHE_URLS = ["/", "/visitor", "/manifest.json"]
BYPASS_PREFIXES = ["/api/", "/_next/", "/sign-in", "/sign-up"]

SERVICE_WORKER = """const CACHE_NAME = '%(cache_name)s';
const PRECACHE_URLS = %(precache)s;
const BYPASS_PREFIXES = %(bypass)s;
const IS_DEV = self.location.hostname === 'localhost' || self.location.hostname === '127.0.0.1';

self.addEventListener('install', (event) => {
  if (IS_DEV) {
    self.skipWaiting();
    return;
  }
  event.waitUntil(caches.open(CACHE_NAME).then((cache) => cache.addAll(PRECACHE_URLS)));
  self.skipWaiting();
});

self.addEventListener('activate', (event) => {
  event.waitUntil(
    caches.keys().then((names) =>
      Promise.all(names.filter((name) => name !== CACHE_NAME).map((name) => caches.delete(name)))
    )
  );
  self.clients.claim();
});

self.addEventListener('fetch', (event) => {
  if (IS_DEV || event.request.method !== 'GET') return;
  const url = new URL(event.request.url);
  if (BYPASS_PREFIXES.some((prefix) => url.pathname.startsWith(prefix))) return;
  event.respondWith(fetch(event.request).catch(() => caches.match(event.request)));
});
"""


def _js_list(values: list[str]) -> str:
    return "[" + ", ".join(f"'{v}'" for v in values) + "]"


def is_local_host(request: Request) -> bool:
    host = request.headers.get("host", "").lower()
    return host.startswith("localhost") or host.startswith("127.0.0.1")


@router.get("/manifest.webmanifest")
@router.get("/manifest.json")
async def web_manifest():
    return JSONResponse(MANIFEST, media_type="application/manifest+json")


@router.get("/sw.js")
async def service_worker(request: Request):
    script = SERVICE_WORKER % {
        "cache_name": DEV_CACHE_NAME if is_local_host(request) else CACHE_NAME,
        "precache": _js_list(PRECACHE_URLS),
        "bypass": _js_list(BYPASS_PREFIXES),
    }
    return Response(
        content=script,
        media_type="application/javascript",
        headers={"Cache-Control": "no-cache", "Service-Worker-Allowed": "/"},
    )
