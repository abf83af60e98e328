# storefront/main.py

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn
from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError
from contextlib import asynccontextmanager

# --- загрузка переменных окружения (до чтения настроек) ---
load_dotenv()

from storefront.config import settings
from storefront.exceptions import StorefrontError
from storefront.services.auth import AdminGate
from storefront.services.chat import ChatResponder
from storefront.services.gpt import create_client
from storefront.services.notification import OrderNotifier
from storefront.services.order_store import build_order_store
from storefront.utils.database import create_engine, create_session_factory, init_db
from storefront.utils.log import Log
from storefront.utils.rate_limit import FixedWindowRateLimiter

import multiprocessing
import os

# --- sync логгер для раннего старта ---
boot_log = Log()
if os.environ.get("RUN_MAIN") == "true" or multiprocessing.current_process().name == "MainProcess":
    boot_log.log_info_sync(target="startup", message="Импорты main.py выполнены")

# ────────────── Lifespan ──────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    boot_log.log_info_sync(target="startup", message="lifespan: startup начат",
                           data={"env": settings.APP_ENV})

    app.state.log = Log()
    log = app.state.log

    # Хостовая база, если задан DATABASE_URL
    engine = None
    session_factory = None
    if settings.DATABASE_URL:
        engine = create_engine(settings.DATABASE_URL)
        session_factory = create_session_factory(engine)
        try:
            await init_db(engine)
            boot_log.log_info_sync(target="startup", message="База инициализирована")
        except (SQLAlchemyError, OSError) as e:
            if settings.is_production:
                boot_log.log_error_sync(target="startup", message=f"База недоступна: {e}")
                raise
            # в разработке запросы уйдут в локальный файл через FallbackOrderStore
            boot_log.log_error_sync(target="startup", message=f"База недоступна, работаем с локальным файлом: {e}")
    else:
        boot_log.log_warning_sync(target="startup", message="DATABASE_URL не задан")

    app.state.engine = engine
    app.state.order_store = build_order_store(settings, session_factory, log)
    if app.state.order_store is None:
        boot_log.log_error_sync(target="startup", message="Production без DATABASE_URL: заказы приниматься не будут")
    else:
        boot_log.log_info_sync(target="startup", message=f"Хранилище заказов: {app.state.order_store.name}")

    app.state.rate_limiter = FixedWindowRateLimiter(
        max_requests=settings.RATE_LIMIT_MAX,
        window_seconds=settings.RATE_LIMIT_WINDOW,
    )
    app.state.admin_gate = AdminGate(settings.ADMIN_PASSWORD, settings.ADMIN_PASSWORD_HASH)
    app.state.notifier = OrderNotifier(
        settings.RESEND_API_KEY, settings.ORDER_EMAIL_FROM, settings.ORDER_NOTIFY_TO, log
    )
    app.state.chat = ChatResponder(create_client(settings.OPENAI_API_KEY), settings.OPENAI_MODEL, log)

    await log.log_info(target="startup", message="Сервисы инициализированы", data={
        "admin_gate": app.state.admin_gate.configured,
        "email": app.state.notifier.configured,
        "chat": app.state.chat.client is not None,
    })

    yield

    # shutdown
    await log.log_info(target="shutdown", message="Остановка приложения")
    if engine is not None:
        await engine.dispose()
    await log.shutdown()
    boot_log.log_info_sync(target="shutdown", message="Log корректно завершён")

# ────────────── Создаём FastAPI приложение ──────────────
app = FastAPI(title="Magie Skin API", lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Ошибки магазина → {"error": ...}
@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

@app.get("/")
def read_root():
    return {"message": "Magie Skin API"}

# ────────────── Подключение роутов ──────────────
from storefront.routes import admin, catalog, chat, order

app.include_router(catalog.router, prefix="/products", tags=["products"])
app.include_router(order.router, tags=["order"])
app.include_router(admin.router, tags=["admin"])
app.include_router(chat.router, prefix="/chat", tags=["chat"])

# ────────────── Запуск uvicorn ──────────────
if __name__ == "__main__":
    boot_log.log_info_sync(target="startup", message="Запуск uvicorn.run")
    uvicorn.run(
        "storefront.main:app",
        host="127.0.0.1",
        port=8000,
        log_level="info",
        reload=not settings.is_production
    )
