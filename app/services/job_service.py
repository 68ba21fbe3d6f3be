"""Job listing service."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import JobNotFound
from app.models.job import Job
from app.models.user import User
from app.schemas.job import JobCreate


class JobService:
    """Minimal job listing operations needed by the application lifecycle."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create_job(self, employer: User, data: JobCreate) -> Job:
        """Create a job owned by ``employer``."""
        job = Job(employer_id=employer.id, **data.model_dump())
        self.db.add(job)
        await self.db.commit()
        await self.db.refresh(job)
        return job

    async def get_job(self, job_id: UUID) -> Job:
        job = await self.db.get(Job, job_id)
        if job is None:
            raise JobNotFound()
        return job
