from sqlalchemy import Column, ForeignKey, Index, Integer, Text, UniqueConstraint, func, text
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata

# Instants (start_time, end_time, start_date, end_date) are stored as Text in
# canonical UTC form "YYYY-MM-DDTHH:MM:SS+00:00", see services/slots/config.py.


class Doctors(Base):
    __tablename__ = 'doctors'

    username = Column(Text, nullable=False, unique=True)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False, unique=True)
    id = Column(Integer, primary_key=True)
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'), onupdate=func.current_timestamp())

    patterns = relationship('RecurringPatterns', back_populates='doctor')
    slots = relationship('Slots', back_populates='doctor')
    bookings = relationship('Bookings', back_populates='doctor')


class Patients(Base):
    __tablename__ = 'patients'

    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False, unique=True)
    id = Column(Integer, primary_key=True)
    phone = Column(Text)
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'), onupdate=func.current_timestamp())

    bookings = relationship('Bookings', back_populates='patient')


class RecurringPatterns(Base):
    __tablename__ = 'recurring_patterns'

    doctor_id = Column(ForeignKey('doctors.id', ondelete='CASCADE'), nullable=False)
    start_time = Column(Text, nullable=False)
    end_time = Column(Text, nullable=False)
    duration = Column(Integer, nullable=False)
    type = Column(Text, nullable=False)
    week_days = Column(Text, nullable=False, server_default=text("'[]'"))
    start_date = Column(Text, nullable=False)
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    id = Column(Integer, primary_key=True)
    end_date = Column(Text)
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))

    doctor = relationship('Doctors', back_populates='patterns')


class Slots(Base):
    __tablename__ = 'slots'
    __table_args__ = (
        UniqueConstraint('doctor_id', 'start_time', 'end_time'),
        Index('ix_slots_doctor_start', 'doctor_id', 'start_time'),
    )

    doctor_id = Column(ForeignKey('doctors.id', ondelete='CASCADE'), nullable=False)
    start_time = Column(Text, nullable=False)
    end_time = Column(Text, nullable=False)
    status = Column(Text, nullable=False, server_default=text("'available'"))
    id = Column(Integer, primary_key=True)
    pattern_id = Column(ForeignKey('recurring_patterns.id', ondelete='SET NULL'))
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))

    doctor = relationship('Doctors', back_populates='slots')
    booking = relationship('Bookings', back_populates='slot', uselist=False)


class Bookings(Base):
    __tablename__ = 'bookings'

    slot_id = Column(ForeignKey('slots.id'), nullable=False, unique=True)
    patient_id = Column(ForeignKey('patients.id'), nullable=False)
    doctor_id = Column(ForeignKey('doctors.id'), nullable=False)
    id = Column(Integer, primary_key=True)
    reason = Column(Text, nullable=False, server_default=text("''"))
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'), onupdate=func.current_timestamp())

    slot = relationship('Slots', back_populates='booking')
    patient = relationship('Patients', back_populates='bookings')
    doctor = relationship('Doctors', back_populates='bookings')
