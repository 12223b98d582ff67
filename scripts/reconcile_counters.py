"""
计数器校准脚本 - 按真实子记录重建 replyCount 与食谱评分

运行方式:
python -m scripts.reconcile_counters
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.exc import SQLAlchemyError

from planeta.core.database import SessionLocal
from planeta.services.counters import reconcile_all


def main() -> int:
    db = SessionLocal()
    try:
        posts, recipes = reconcile_all(db)
        print(f"✓ Recalculados {posts} posts y {recipes} recetas")
        return 0
    except SQLAlchemyError as e:
        db.rollback()
        print(f"✗ Error al recalcular contadores: {e}")
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
