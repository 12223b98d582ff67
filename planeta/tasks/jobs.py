import logging
import redis
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.exc import SQLAlchemyError
from planeta.core.database import SessionLocal
from planeta.core.cache import redis_client
from planeta.core.config import settings
from planeta.services.counters import increment_post_views, reconcile_all

logger = logging.getLogger(__name__)

# 创建调度器实例
scheduler = AsyncIOScheduler()

VIEWS_KEY_PATTERN = "forum_post:*:views"


def _post_id_from_key(key: str):
    # key 示例: forum_post:forumPost_9f1c...:views
    parts = key.split(":")
    if len(parts) == 3 and parts[1]:
        return parts[1]
    return None


def sync_views_to_db():
    """
    定时任务：将 Redis 中累计的帖子浏览量增量写回数据库

    同步函数, 由调度器放到线程池执行, 不阻塞事件循环
    """
    logger.info("Starting scheduled task: Sync forum views to DB")
    db = SessionLocal()
    try:
        r = redis_client.get_client()
        updated_count = 0

        for key in r.scan_iter(match=VIEWS_KEY_PATTERN):
            post_id = _post_id_from_key(key)
            if post_id is None:
                logger.error(f"Unexpected views key {key}")
                continue
            # 取出并清零, 之后的浏览量继续在 Redis 中累计
            delta = r.getdel(key)
            if not delta or int(delta) <= 0:
                continue
            try:
                increment_post_views(db, post_id, int(delta))
            except SQLAlchemyError as e:
                # 写库失败时把增量放回 Redis, 下一轮再同步
                db.rollback()
                r.incrby(key, int(delta))
                logger.error(f"Failed to sync {delta} views of post {post_id}, delta restored: {e}")
                continue
            updated_count += 1

        if not updated_count:
            logger.info("No views to sync")
            return
        logger.info(f"Successfully synced views of {updated_count} forum posts to DB")

    except (redis.RedisError, SQLAlchemyError) as e:
        logger.error(f"Error syncing views: {e}", exc_info=True)
        db.rollback()
    finally:
        db.close()


def reconcile_counters():
    """
    定时任务：按真实子记录重建 replyCount 与食谱评分
    """
    logger.info("Starting scheduled task: Reconcile counters")
    db = SessionLocal()
    try:
        posts, recipes = reconcile_all(db)
        logger.info(f"Reconciled counters of {posts} posts and {recipes} recipes")
    except SQLAlchemyError as e:
        logger.error(f"Error reconciling counters: {e}", exc_info=True)
        db.rollback()
    finally:
        db.close()


def start_scheduler():
    """启动调度器"""
    if not scheduler.running:
        scheduler.start()
        logger.info("Scheduler started")

        scheduler.add_job(
            sync_views_to_db,
            trigger=IntervalTrigger(minutes=settings.SYNC_VIEWS_INTERVAL_MINUTES),
            id="sync_views_job",
            replace_existing=True,
            name="Sync Forum Views"
        )
        scheduler.add_job(
            reconcile_counters,
            trigger=IntervalTrigger(minutes=settings.RECONCILE_INTERVAL_MINUTES),
            id="reconcile_counters_job",
            replace_existing=True,
            name="Reconcile Counters"
        )
        logger.info(
            f"Added jobs: sync views every {settings.SYNC_VIEWS_INTERVAL_MINUTES} min, "
            f"reconcile counters every {settings.RECONCILE_INTERVAL_MINUTES} min"
        )


def stop_scheduler():
    """关闭调度器"""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler shutdown")
