import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.exceptions import register_exception_handlers
from app.routers import (
    auth_router, user_router, profile_router,
    mission_router, interview_router, contract_router,
    feedback_router, dispute_router, matching_router,
    shortlist_router, notification_router, payment_router,
    assessment_router, analytics_router
)

# 單一檔案中有 *兩個* router 的模組
from app.routers.application_router import (
    router as application_main_router,
    mission_application_router
)
from app.routers.milestone_router import (
    router as milestone_main_router,
    contract_milestone_router
)
from app.routers.tracking_router import (
    router as tracking_main_router,
    contract_tracking_router
)

# --- 匯入所有 Model 檔案 ---
# 都在應用程式啟動時被 SQLAlchemy 註冊。
from app.models import user
from app.models import freelancer_profile
from app.models import company_profile
from app.models import mission
from app.models import application
from app.models import interview
from app.models import assessment
from app.models import contract
from app.models import tracking_entry
from app.models import payment
from app.models import feedback
from app.models import dispute
from app.models import shortlist
from app.models import notification


# 設定基礎日誌
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__) # 建立一個 logger 實例

app = FastAPI(title="SkillBridge API")

# --- 設定 CORS (跨來源資源共用) ---
# 允許所有來源 (在生產環境中應限制)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"], # 允許所有來源 (或指定 'http://localhost:5173')
    allow_credentials=True,
    allow_methods=["*"], # 允許所有 HTTP 方法
    allow_headers=["*"], # 允許所有 HTTP 標頭
)

# --- 錯誤統一回傳 {success: false, error: {...}} ---
register_exception_handlers(app)

# --- 根路徑 ---
@app.get("/")
def read_root():
    return {"success": True, "data": {"status": "ok"}, "message": "Backend is running!"}

# --- 載入 API 路由 ---
app.include_router(auth_router.router)
app.include_router(user_router.router)
app.include_router(profile_router.router)
app.include_router(mission_router.router)
app.include_router(mission_application_router)
app.include_router(application_main_router)
app.include_router(interview_router.router)
app.include_router(assessment_router.router)
app.include_router(contract_router.router)
app.include_router(contract_milestone_router)
app.include_router(milestone_main_router)
app.include_router(contract_tracking_router)
app.include_router(tracking_main_router)
app.include_router(payment_router.router)
app.include_router(feedback_router.router)
app.include_router(dispute_router.router)
app.include_router(matching_router.router)
app.include_router(shortlist_router.router)
app.include_router(notification_router.router)
app.include_router(analytics_router.router)

logger.info("API 路由載入完成")
