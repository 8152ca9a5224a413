# db 연결 + 요청 단위 세션
from fastapi import Depends
from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker
from dotenv import load_dotenv
from sqlalchemy.orm import Session

from sehat.core.config import settings
from sehat.core.security import UserContext, get_current_user

load_dotenv()

DATABASE_URL = settings.DATABASE_URL

engine = create_engine(
    DATABASE_URL,
    echo=False,   # SQL 로그 출력
    pool_pre_ping=True,
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# DB 세션 Dependency
def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def bind_user(db: Session, user: UserContext) -> Session:
    """
    PostgreSQL이면 트랜잭션 시작마다 app.current_user_id 를 세팅한다.
    RLS 정책(alembic 0001)이 이 값으로 row를 걸러낸다.
    """
    def _set_current_user(session, transaction, connection):
        if connection.dialect.name == "postgresql":
            connection.execute(
                text("select set_config('app.current_user_id', :uid, true)"),
                {"uid": str(user.user_id)},
            )

    event.listen(db, "after_begin", _set_current_user)
    return db


def get_user_db(
    user: UserContext = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Session:
    return bind_user(db, user)
