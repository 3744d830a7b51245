# linkshort

`linkshort` is a small URL shortening service that runs as a WSGI
application. You give it a long URL and it returns a short base62 key or a
custom alias of your choosing. Visitors who open the short key are redirected
to the original address.

## HTTP interface

- `POST /shorten` accepts a JSON body with these fields:
  - `originalURL`, which is required and must be an absolute `http` or `https` URL.
  - `customURL`, which is optional and must be 3 to 20 ASCII letters or digits.
  - `expirationDate`, which is optional and must be an RFC 3339 time.

  On success it returns `201 Created` with the stored record. The record's
  `shortURL` field always has the form `http://localhost:8080/<key>`. URLs
  that already begin with `http://localhost:8080/` are refused. An alias that
  is already taken returns `409`.
- `GET /{shorturl}` returns `302 Found` with a redirect to the original URL
  and the header `Cache-Control: no-store`. A short key must be 1 to 10 ASCII
  letters or digits. Other keys get `400`, and keys that are not known get
  `404`.
- `GET /preview/{shorturl}` returns the stored record as JSON. The response
  carries `Last-Modified`, taken from the creation time, and
  `Cache-Control: public, max-age=3600`.
- `GET /health` returns `{"status": "OK"}`.
- `GET /panic` raises an exception. The recovery middleware turns it into a
  `500 Internal Server Error` response.
- `GET /` serves `web/templates/index.html` and `GET /favicon.ico` serves
  `web/assets/favicon.ico`. Both paths are read relative to the working
  directory and can be changed with the `template_path` and `favicon_path`
  arguments of `Handler`.

JSON errors have this shape:

```
{"errors": [{"status": 400, "title": "...", "detail": "..."}]}
```

A handful of failures are returned as plain text instead, including storage
errors that are not "not found" or "conflict".

## Installation

```
pip install linkshort
```

The test suite needs the `test` extra:

```
pip install "linkshort[test]"
```

## Running the service

The `linkshort` command starts a threaded HTTP server:

```
linkshort
```

To list its options:

```
linkshort --help
```

| Option | Default | Meaning |
| --- | --- | --- |
| `--port` | `$PORT` or `:8080` | address to listen on, in `host:port` form |
| `--db` | `mongodb` | storage back end: `mongodb` or `memory` |
| `--mongo-uri` | `$MONGO_URI` or `mongodb://localhost:27017` | MongoDB connection URI |
| `--redis-url` | `$REDIS_URL` or `redis://localhost:6379/0` | Redis connection URL |

How the command behaves at startup and shutdown:

- **Redis is required.** If Redis cannot be reached, the command exits with
  status 1.
- **MongoDB is optional.** If it cannot be reached, the service falls back to
  the in-memory store.
- **First MongoDB connection.** When the `url_shortener_db` database does not
  exist yet, it is created. This includes the `urls` collection with a schema
  validator and a unique index on `short_url`.
- **Shutdown.** SIGINT or SIGTERM stops the server gracefully and closes the
  database connection.

## Using it as a library

```python
from linkshort.inmemory import InMemoryRepository
from linkshort.service import ShortenerService
from linkshort.handler import Handler
from linkshort.router import create_app
from linkshort.token_bucket import TokenBucket

service = ShortenerService(InMemoryRepository())
app = create_app(Handler(service), TokenBucket(2, 5))
```

`app` is an ordinary WSGI callable. If you leave out the limiter,
`create_app` admits 2 requests per second with bursts of 5. Paths under
`/swagger/` are never rate limited. `linkshort.server.start(app, ":8080")`
serves the app until a signal arrives.

### Building blocks

- `linkshort.base62`:
  - `encode_base62(12345)` returns `"3d7"`.
  - `decode_base62("3d7")` returns `12345`.
  - Characters outside `0-9a-zA-Z` raise `ValueError`.
- `linkshort.repository.URLRepository` is the storage interface. It has
  three methods: `save_url`, `get_url` and `increment_counter`.
- Implementations of that interface:
  - `InMemoryRepository`.
  - `MongoRepository`, which takes a pymongo collection.
  - `PostgresRepository`, which takes a DB-API connection to a database with
    a `urls` table and a `url_shortener_seq` sequence.
- `linkshort.database.setup_db` picks a repository from a `DBType` and
  returns it together with a cleanup function.
- `linkshort.redis_cache.RedisCache` stores JSON values in Redis:
  - Reading a value refreshes its time to live to two hours.
  - A key that is not present raises `CacheMiss`.
- `linkshort.cached_repository.CachedRepository` puts a cache in front of
  another repository:
  - Records are stored under `shorturl:<key>` for one hour.
  - Counters come from the `url_shortener_counter` key, and the wrapped
    repository is used when the cache fails.
  - Cache errors are logged and never fail a request.
- `linkshort.middleware` provides WSGI middleware: `chain`,
  `request_logger`, `recovery` and `rate_limiter`.

## Rate limiters

Each limiter has an `allow()` method. The keyed variants take a key, such as
a client IP address. The time-based limiters accept a `clock` keyword for
testing.

- `fixed_window`: `FixedWindowGlobalLimiter` and `FixedWindowKeyedLimiter`.
- `sliding_window`: `SlidingWindowGlobalLimiter` and `SlidingWindowKeyedLimiter`.
- `leaky_bucket`: `LeakyBucketGlobalLimiter` and `LeakyBucketKeyedLimiter`.
- `token_bucket`:
  - `TokenBucket` is a single bucket.
  - `IPRateLimiter` keeps one bucket per client and drops idle buckets in a
    background thread. Call `close()` to stop that thread.
  - `IPRateLimiter.middleware(app)` answers `429` once a client runs out of
    tokens. The client address comes from the first `X-Forwarded-For` entry
    when that header is present.
- `reset_window`: `ResettingWindowLimiter.allow(ip)` returns a pair. The pair
  holds whether the request is allowed and how long to wait when it is not.

```python
from linkshort.sliding_window import SlidingWindowKeyedLimiter

limiter = SlidingWindowKeyedLimiter(10, 60.0)
if limiter.allow("203.0.113.7"):
    ...
```

## What it does not do

- **Expiration dates.** They are stored and returned, but never enforced.
  Expired links keep redirecting.
- **Generated links.** Short links always point at
  `http://localhost:8080/`. The base cannot be configured.
- **PostgreSQL.** The `linkshort` command cannot use PostgreSQL, and no
  PostgreSQL driver is included. To use `PostgresRepository`, pass
  `setup_db` a function that returns a connection. Create the schema
  yourself.
- **Static files.** The index page and favicon files are not shipped with
  the package.
- **API documentation.** No API documentation is served under `/swagger/`.