from __future__ import annotations

from datetime import datetime

from buildoffice import db
from buildoffice.business.core.payload import coerce_payload, require
from buildoffice.data.projects.project import PROJECT_STATUSES, QUOTE_STATUSES, Project
from buildoffice.logger import get_logger

logger = get_logger("buildoffice.business.projects.project")

PROJECT_FIELDS_LOCKED = ('is_deleted', 'deleted_at', 'total_value')


def _validate(data: dict) -> None:
    if 'status' in data and data['status'] not in PROJECT_STATUSES:
        raise ValueError(f"Invalid project status: {data['status']}")
    if 'quote_status' in data and data['quote_status'] not in QUOTE_STATUSES:
        raise ValueError(f"Invalid quote status: {data['quote_status']}")


class ProjectContext:

    def __init__(self, project_id: int):
        self.project = Project.query.get_or_404(project_id)

    @staticmethod
    def create(fields: dict) -> Project:
        data = coerce_payload(Project, fields)
        require(data, 'name')
        data.setdefault('status', 'Planned')
        data.setdefault('quote_status', 'Draft')
        _validate(data)
        project = Project.from_dict(data, skip_fields=PROJECT_FIELDS_LOCKED)
        project.total_value = 0.0
        if project.quote_status == 'Accepted' and project.accepted_date is None:
            project.accepted_date = datetime.utcnow()
        db.session.add(project)
        db.session.commit()
        logger.info(f"Created project {project.id}: {project.name}")
        return project

    def update(self, fields: dict) -> Project:
        """Apply edits; accepting the quote stamps the acceptance date"""
        data = coerce_payload(Project, fields)
        if 'name' in data:
            require(data, 'name')
        _validate(data)
        changed = self.project.update_from_dict(data, skip_fields=PROJECT_FIELDS_LOCKED)
        if 'quote_status' in changed and self.project.quote_status == 'Accepted':
            self.project.accepted_date = datetime.utcnow()
        db.session.commit()
        logger.info(f"Updated project {self.project.id}: {sorted(changed)}")
        return self.project

    def delete(self) -> None:
        self.project.soft_delete()
        db.session.commit()
        logger.info(f"Soft-deleted project {self.project.id}")
