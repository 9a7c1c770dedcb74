"""Human-readable labels for assessment answer keys (staff screens, traces)."""
import json
import re


ASSESSMENT_LABELS: dict[str, str] = {
    # Functionality (yes/no)
    'powerOn': 'Powers on',
    'cameraFunction': 'Camera function',
    'buttonsWorking': 'Buttons working',
    'waterDamage': 'Water damage',
    'flashWorking': 'Flash working',
    'memoryCardSlotWorking': 'Memory card slot',
    'speakerWorking': 'Speaker working',
    'bodyDamage': 'Body damage',
    'lcdWorking': 'LCD working',
    'lensScratches': 'Lens scratches',
    'autofocusWorking': 'Autofocus working',
    'additionalLens': 'Additional lens',
    'batteryHealth': 'Battery health',
    'biometricWorking': 'Biometric working',
    'cameraWorking': 'Camera working',
    'trueTone': 'True Tone available',
    'fingerprintWorking': 'Fingerprint working',
    'faceRecognitionWorking': 'Face Recognition working',
    'display120Hz': '120Hz / High refresh rate',
    'eyeComfortShield': 'Eye Comfort Shield',
    'sPenTipGood': 'S Pen tip condition',
    'sPenWriting': 'S Pen writing/touch',
    'sPenAirActions': 'S Pen Air Actions',
    'sPenCharging': 'S Pen charging/connectivity',
    'batteryHealthSamsung': 'Battery health (Samsung)',
    'screenCondition': 'Screen condition',
    'keyboardWorking': 'Keyboard working',
    'batteryCycleCount': 'Battery cycle count',
    'portsWorking': 'Ports working',
    'chargingWorking': 'Charging working',
    'batteryWorking': 'Battery working',
    # Body / physical (cameras)
    'bodyPhysicalCondition': 'Body condition',
    'lcdDisplayCondition': 'LCD display',
    'rubberGripsCondition': 'Rubber grips',
    'sensorViewfinderCondition': 'Sensor / viewfinder',
    'errorCodesCondition': 'Error codes',
    # Lens
    'lensCondition': 'Lens condition',
    'hasLensToSell': 'Lens to sell',
    'fungusDustCondition': 'Fungus / dust',
    'focusFunctionality': 'Focus functionality',
    'rubberRingCondition': 'Rubber ring',
    'lensErrorStatus': 'Lens error status',
    # Condition / display
    'bodyCondition': 'Body condition',
    'displayCondition': 'Display condition',
    'batteryHealthRange': 'Battery health',
    'cameraCondition': 'Camera condition',
    'errorCondition': 'Error condition',
    # Other
    'accessories': 'Accessories',
    'age': 'Age of device',
    'functionalIssues': 'Functional issues',
}

VALUE_LABELS: dict[str, str] = {
    'yes': 'Yes',
    'no': 'No',
    'lessThan3Months': 'Less than 3 months',
    'fourToTwelveMonths': '4–12 months',
    'aboveTwelveMonths': 'Above 12 months',
    'likeNew': 'Like new',
    'average': 'Average',
    'worn': 'Worn',
    'good': 'Good',
    'fair': 'Fair',
    'poor': 'Poor',
    'clean': 'Clean',
    'minor': 'Minor',
    'major': 'Major',
    'none': 'None',
    'intermittent': 'Intermittent',
    'persistent': 'Persistent',
    'noIssues': 'No issues',
}


def get_assessment_label(key: str) -> str:
    """Label for an answer key; unknown camelCase keys are split into words."""
    if key in ASSESSMENT_LABELS:
        return ASSESSMENT_LABELS[key]
    spaced = re.sub(r'([A-Z])', r' \1', key).strip()
    return spaced[:1].upper() + spaced[1:]


def format_answer_value(value) -> str:
    """Format a raw answer value for display."""
    if value is None:
        return '—'
    if isinstance(value, (list, tuple)):
        return ', '.join(VALUE_LABELS.get(str(v), str(v)) for v in value)
    if isinstance(value, dict):
        return json.dumps(value)
    s = str(value)
    return VALUE_LABELS.get(s, s)
