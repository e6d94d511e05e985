"""Fixed department catalog and nurse roster used by the bulk seed operations."""
from __future__ import annotations

DEPARTMENTS: tuple[str, ...] = (
    'Cardiology',
    'Cardiothoracic Surgery',
    'Cardiovascular Surgery',
    'Cathlab',
    'Day Care & Minor Procedure',
    'ENT',
    'Gastroenterology',
    'General Surgery',
    'ICU & Casualty',
    'Maxillo Facial Surgery',
    'Neuro Surgery',
    'OBGY & Gynaecology',
    'Oncology / Onco Surgery / Radiation',
    'Orthopedic Surgery',
    'Paediatric Cardiac Unit',
    'Paediatric General Surgery',
    'Paediatric Orthopedics',
    'Pain Management',
    'Pathology',
    'Plastic Surgery',
    'Radiology',
    'Rehabilitation Services',
    'Uro Surgery',
    'Vascular Surgery',
)

_NURSE_NAMES: tuple[str, ...] = (
    'Anita Sharma',
    'Priya Nair',
    'Kavita Patil',
    'Sunita Reddy',
    'Meena Iyer',
    'Rekha Joshi',
    'Pooja Kulkarni',
    'Deepa Menon',
    'Asha Verma',
    'Lakshmi Rao',
    'Neha Deshmukh',
    'Swati Gupta',
    'Radha Pillai',
    'Shalini Singh',
    'Geeta Chavan',
    'Nisha Kapoor',
    'Jyoti Pawar',
    'Komal Shetty',
    'Rupa Bhat',
    'Usha Naidu',
    'Vandana Mishra',
    'Seema Jadhav',
    'Archana Das',
    'Manisha Kale',
)


def nurse_id_for(index: int) -> str:
    return f"NUR-{index + 1:03d}"


def _roster() -> tuple[dict, ...]:
    # Rotate through the department catalog so each nurse gets three
    # distinct departments.
    total = len(DEPARTMENTS)
    entries = []
    for index, name in enumerate(_NURSE_NAMES):
        entries.append({
            'nurse_id': nurse_id_for(index),
            'nurse_name': name,
            'primary_department': DEPARTMENTS[index % total],
            'secondary_department': DEPARTMENTS[(index + 8) % total],
            'tertiary_department': DEPARTMENTS[(index + 16) % total],
        })
    return tuple(entries)


NURSE_ROSTER: tuple[dict, ...] = _roster()
