# Bind & workers
bind = "0.0.0.0:8000"
workers = 2  # override with env GUNICORN_WORKERS
# Session checks block on Redis/DB I/O; threads keep other requests moving.
worker_class = "gthread"
threads = 4
timeout = 60
graceful_timeout = 30
keepalive = 5

# Logs to stdout/stderr (collected by Docker)
accesslog = "-"
errorlog = "-"
loglevel = "info"  # override with env LOG_LEVEL

# Trust proxy headers (TLS terminates upstream; refresh cookie is Secure)
forwarded_allow_ips = "*"
proxy_protocol = False
