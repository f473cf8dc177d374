from sqlalchemy import Column, Date, Integer, String

from sql_gateway.core.database import Base


# =========================
# Patient
# =========================
class Patient(Base):
    """
    The table the provisioner guarantees on the secondary database.
    Clients fill it through the gateway with plain INSERT/SELECT.
    """

    __tablename__ = "patients"

    # SERIAL on postgres
    patient_id = Column(Integer, primary_key=True, autoincrement=True)

    name = Column(String(100), nullable=False)
    dateofbirth = Column(Date, nullable=False)
