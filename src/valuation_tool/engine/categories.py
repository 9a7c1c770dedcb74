"""
Assessment categories - every question and condition group the pricing
rules know how to price.

Answer keys and condition labels arrive as plain strings from the
assessment forms. The enums below close the set of *categories*; the
labels inside a group stay open so rules can price a label the forms
added before the code heard about it.
"""
from enum import Enum
from typing import Optional


class GroupKind(str, Enum):
    """How the answers of a category are turned into adjustments."""
    YES_NO = "yes_no"
    SINGLE_SELECT = "single_select"
    MULTI_SELECT = "multi_select"
    FUNCTIONAL_ISSUES = "functional_issues"


class YesNoQuestion(str, Enum):
    """Boolean functionality checks, priced from the `questions` group."""
    # Cameras
    POWER_ON = "powerOn"
    CAMERA_FUNCTION = "cameraFunction"
    BUTTONS_WORKING = "buttonsWorking"
    WATER_DAMAGE = "waterDamage"
    FLASH_WORKING = "flashWorking"
    MEMORY_CARD_SLOT_WORKING = "memoryCardSlotWorking"
    SPEAKER_WORKING = "speakerWorking"
    HAS_LENS_TO_SELL = "hasLensToSell"
    BODY_DAMAGE = "bodyDamage"
    LCD_WORKING = "lcdWorking"
    LENS_SCRATCHES = "lensScratches"
    AUTOFOCUS_WORKING = "autofocusWorking"
    ADDITIONAL_LENS = "additionalLens"
    # Phones
    BATTERY_HEALTH = "batteryHealth"
    BIOMETRIC_WORKING = "biometricWorking"
    CAMERA_WORKING = "cameraWorking"
    TRUE_TONE = "trueTone"
    # Laptops / tablets
    SCREEN_CONDITION = "screenCondition"
    KEYBOARD_WORKING = "keyboardWorking"
    BATTERY_CYCLE_COUNT = "batteryCycleCount"
    PORTS_WORKING = "portsWorking"
    CHARGING_WORKING = "chargingWorking"
    BATTERY_WORKING = "batteryWorking"
    # Samsung phones
    FINGERPRINT_WORKING = "fingerprintWorking"
    FACE_RECOGNITION_WORKING = "faceRecognitionWorking"
    DISPLAY_120HZ = "display120Hz"
    EYE_COMFORT_SHIELD = "eyeComfortShield"
    S_PEN_TIP_GOOD = "sPenTipGood"
    S_PEN_WRITING = "sPenWriting"
    S_PEN_AIR_ACTIONS = "sPenAirActions"
    S_PEN_CHARGING = "sPenCharging"


class ConditionGroup(str, Enum):
    """Enumerated and additive adjustment groups."""
    # Single selection
    LENS_CONDITION = "lensCondition"
    ERROR_CONDITION = "errorCondition"
    BATTERY_HEALTH_RANGE = "batteryHealthRange"
    BATTERY_HEALTH_SAMSUNG = "batteryHealthSamsung"
    CAMERA_CONDITION = "cameraCondition"
    BODY_PHYSICAL_CONDITION = "bodyPhysicalCondition"
    LCD_DISPLAY_CONDITION = "lcdDisplayCondition"
    RUBBER_GRIPS_CONDITION = "rubberGripsCondition"
    SENSOR_VIEWFINDER_CONDITION = "sensorViewfinderCondition"
    ERROR_CODES_CONDITION = "errorCodesCondition"
    AGE = "age"
    # Multiple selection (additive)
    DISPLAY_CONDITION = "displayCondition"
    BODY_CONDITION = "bodyCondition"
    FUNGUS_DUST_CONDITION = "fungusDustCondition"
    FOCUS_FUNCTIONALITY = "focusFunctionality"
    RUBBER_RING_CONDITION = "rubberRingCondition"
    LENS_ERROR_STATUS = "lensErrorStatus"
    ACCESSORIES = "accessories"
    # Multiple selection with the "noIssues" override
    FUNCTIONAL_ISSUES = "functionalIssues"

    @property
    def kind(self) -> GroupKind:
        return GROUP_KINDS[self]


QUESTIONS_GROUP = "questions"
NO_ISSUES = "noIssues"
YES = "yes"
NO = "no"


GROUP_KINDS: dict[ConditionGroup, GroupKind] = {
    ConditionGroup.LENS_CONDITION: GroupKind.SINGLE_SELECT,
    ConditionGroup.ERROR_CONDITION: GroupKind.SINGLE_SELECT,
    ConditionGroup.BATTERY_HEALTH_RANGE: GroupKind.SINGLE_SELECT,
    ConditionGroup.BATTERY_HEALTH_SAMSUNG: GroupKind.SINGLE_SELECT,
    ConditionGroup.CAMERA_CONDITION: GroupKind.SINGLE_SELECT,
    ConditionGroup.BODY_PHYSICAL_CONDITION: GroupKind.SINGLE_SELECT,
    ConditionGroup.LCD_DISPLAY_CONDITION: GroupKind.SINGLE_SELECT,
    ConditionGroup.RUBBER_GRIPS_CONDITION: GroupKind.SINGLE_SELECT,
    ConditionGroup.SENSOR_VIEWFINDER_CONDITION: GroupKind.SINGLE_SELECT,
    ConditionGroup.ERROR_CODES_CONDITION: GroupKind.SINGLE_SELECT,
    ConditionGroup.AGE: GroupKind.SINGLE_SELECT,
    ConditionGroup.DISPLAY_CONDITION: GroupKind.MULTI_SELECT,
    ConditionGroup.BODY_CONDITION: GroupKind.MULTI_SELECT,
    ConditionGroup.FUNGUS_DUST_CONDITION: GroupKind.MULTI_SELECT,
    ConditionGroup.FOCUS_FUNCTIONALITY: GroupKind.MULTI_SELECT,
    ConditionGroup.RUBBER_RING_CONDITION: GroupKind.MULTI_SELECT,
    ConditionGroup.LENS_ERROR_STATUS: GroupKind.MULTI_SELECT,
    ConditionGroup.ACCESSORIES: GroupKind.MULTI_SELECT,
    ConditionGroup.FUNCTIONAL_ISSUES: GroupKind.FUNCTIONAL_ISSUES,
}


# Labels offered by the assessment forms for each group.
KNOWN_CONDITIONS: dict[ConditionGroup, tuple[str, ...]] = {
    ConditionGroup.LENS_CONDITION: ("withoutLens", "good", "autofocusIssue", "fungus", "scratches"),
    ConditionGroup.ERROR_CONDITION: ("noErrors", "minorErrors", "frequentErrors"),
    ConditionGroup.BATTERY_HEALTH_RANGE: ("battery90Above", "battery80to90", "battery50to80", "batteryBelow50"),
    ConditionGroup.BATTERY_HEALTH_SAMSUNG: ("normalGood", "actionRequired"),
    ConditionGroup.CAMERA_CONDITION: (
        "cameraGood", "frontCameraNotWorking", "backCameraNotWorking",
        "backCameraNotFocusing", "bothCamerasNotWorking",
    ),
    ConditionGroup.BODY_PHYSICAL_CONDITION: ("likeNew", "average", "worn"),
    ConditionGroup.LCD_DISPLAY_CONDITION: ("good", "fair", "poor"),
    ConditionGroup.RUBBER_GRIPS_CONDITION: ("good", "fair", "poor"),
    ConditionGroup.SENSOR_VIEWFINDER_CONDITION: ("clean", "minor", "major"),
    ConditionGroup.ERROR_CODES_CONDITION: ("none", "intermittent", "persistent"),
    ConditionGroup.AGE: ("lessThan3Months", "fourToTwelveMonths", "aboveTwelveMonths"),
    ConditionGroup.DISPLAY_CONDITION: (
        "excellent", "good", "fair", "cracked",
        "goodWorking", "screenLine", "minorCrack", "majorDamage", "notWorking",
    ),
    ConditionGroup.BODY_CONDITION: ("excellent", "good", "fair", "poor"),
    ConditionGroup.FUNGUS_DUST_CONDITION: ("clean", "minorFungus", "majorFungus"),
    ConditionGroup.FOCUS_FUNCTIONALITY: ("goodFocus", "afIssue", "mfIssue"),
    ConditionGroup.RUBBER_RING_CONDITION: ("goodRubber", "minorRubber", "majorRubber"),
    ConditionGroup.LENS_ERROR_STATUS: ("noErrors", "occasionalErrors", "frequentErrors"),
    ConditionGroup.ACCESSORIES: (
        "adapter", "battery", "charger", "box", "bag", "cable", "manual", "case",
        "bill", "warrantyCard", "tripod", "superFastCharger", "sPen", "screenProtector",
    ),
    ConditionGroup.FUNCTIONAL_ISSUES: (
        "microphoneIssue", "speakerIssue", "chargingPortIssue", "touchScreenIssue",
        "wifiIssue", "buttonIssue", "frameDamageIssue", "bodyDamageIssue",
        "waterDamageIssue", "networkIssue", "batteryIssue", "flashlightIssue",
        "memoryCardIssue", "connectorIssue", NO_ISSUES,
    ),
}


_QUESTIONS_BY_VALUE = {q.value: q for q in YesNoQuestion}
_GROUPS_BY_VALUE = {g.value: g for g in ConditionGroup}


def parse_question(key: str) -> Optional[YesNoQuestion]:
    """Return the yes/no question for an answer key, or None."""
    return _QUESTIONS_BY_VALUE.get(key)


def parse_group(key: str) -> Optional[ConditionGroup]:
    """Return the condition group for an answer key, or None."""
    return _GROUPS_BY_VALUE.get(key)


def is_known_answer_key(key: str) -> bool:
    return key in _QUESTIONS_BY_VALUE or key in _GROUPS_BY_VALUE

