"""
Persistence collaborator for the distribution entities.

One `Repository` wraps one ORM class. Every `save` and `delete` commits on
its own, so each document write is an independent atomic unit; there are no
multi-row transactions in the lifecycle code.
"""

from typing import List, Optional

from sqlalchemy.orm.session import Session

from distribution.src.codes import parseCodeNumber
from distribution.src.db import Fare


class Repository:
    def __init__(self, session: Session, orm_class):
        self.session = session
        self.orm_class = orm_class

    def findById(self, pk: int):
        return self.session.get(self.orm_class, pk)

    def findAll(self) -> List:
        return self.session.query(self.orm_class).order_by(self.orm_class.id).all()

    def findAllByStatus(self, status: str) -> List:
        return (
            self.session.query(self.orm_class)
            .filter(self.orm_class.status == status)
            .order_by(self.orm_class.id)
            .all()
        )

    def findAllByOrganization(self, organizationId: str) -> List:
        return (
            self.session.query(self.orm_class)
            .filter(self.orm_class.organization_id == organizationId)
            .order_by(self.orm_class.id)
            .all()
        )

    def findHighestByCode(self, prefix: str):
        """
        Return the record holding the highest well formed code of the kind.

        Codes are ranked by their numeric part, so `TAR1000` outranks
        `TAR999` and a zero padded legacy `TAR0005` ranks as 5. Records whose
        code does not parse under `prefix` are skipped.
        """
        highest, highestNumber = None, None
        query = self.session.query(self.orm_class).filter(
            self.orm_class.code.startswith(prefix)
        )
        for record in query.yield_per(100):
            number = parseCodeNumber(prefix, record.code)
            if number is None:
                continue
            if highestNumber is None or number > highestNumber:
                highest, highestNumber = record, number
        return highest

    def existsByCode(self, code: str) -> bool:
        query = self.session.query(self.orm_class).filter(self.orm_class.code == code)
        return self.session.query(query.exists()).scalar()

    def save(self, record):
        try:
            self.session.add(record)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(record)
        return record

    def delete(self, record) -> None:
        try:
            self.session.delete(record)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def deleteById(self, pk: int) -> None:
        try:
            self.session.query(self.orm_class).filter(self.orm_class.id == pk).delete()
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def count(self, status: Optional[str] = None) -> int:
        query = self.session.query(self.orm_class)
        if status is not None:
            query = query.filter(self.orm_class.status == status)
        return query.count()


class FareRepository(Repository):
    def __init__(self, session: Session):
        super().__init__(session, Fare)

    def findByOrganizationAndStatusOrderByEffectiveDateDesc(
        self, organizationId: str, status: str
    ) -> List[Fare]:
        return (
            self.session.query(Fare)
            .filter(Fare.organization_id == organizationId)
            .filter(Fare.status == status)
            .order_by(Fare.effective_date.desc(), Fare.id.desc())
            .all()
        )
